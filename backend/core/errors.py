# -*- coding: utf-8 -*-
"""
错误类型定义 - Alba NihonGo
查询、存储、游戏三类错误
"""


class AlbaError(Exception):
    """所有业务错误的基类"""


class ConnectivityError(AlbaError):
    """词典服务连接失败（网络异常、超时、非200响应）"""


class StorageParseError(AlbaError):
    """本地存储数据损坏，无法解析"""


class StorageWriteError(AlbaError):
    """本地存储写入失败"""


class StorageQuotaExceededError(StorageWriteError):
    """写入数据超过存储配额"""

    def __init__(self, size: int, quota: int):
        self.size = size
        self.quota = quota
        super().__init__(f"存储配额不足: 需要 {size} 字节, 配额 {quota} 字节")


class NotEnoughCardsError(AlbaError):
    """卡组中可用于记忆游戏的卡片不足"""

    def __init__(self, available: int, required: int = 2):
        self.available = available
        self.required = required
        super().__init__(f"至少需要 {required} 张不同的卡片, 当前只有 {available} 张")
