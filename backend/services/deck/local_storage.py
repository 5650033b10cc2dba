# -*- coding: utf-8 -*-
"""
本地键值存储 - Alba NihonGo
模拟浏览器 localStorage：字符串键、字符串值、总容量配额，数据保存在一个JSON文件中
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from core.errors import StorageParseError, StorageQuotaExceededError, StorageWriteError

logger = logging.getLogger(__name__)

# 浏览器 localStorage 的常见配额
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class LocalStorage:
    """
    本地键值存储服务

    文件内容为 {key: value} 的JSON对象，每次写入整体覆盖文件
    """

    def __init__(self, storage_file: Path, quota_bytes: int = DEFAULT_QUOTA_BYTES):
        """
        初始化存储服务

        Args:
            storage_file: JSON文件路径
            quota_bytes: 所有键值的总字节上限，0 表示不限制
        """
        self.storage_file = Path(storage_file)
        self.quota_bytes = quota_bytes

    def _load_data(self) -> Dict[str, str]:
        """加载全部键值"""
        if not self.storage_file.exists():
            return {}

        try:
            data = json.loads(self.storage_file.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise StorageParseError(f"无法读取存储文件 {self.storage_file}: {e}") from e

        if not isinstance(data, dict):
            raise StorageParseError(f"存储文件格式错误: {self.storage_file}")
        return data

    def _save_data(self, data: Dict[str, str]):
        """保存全部键值"""
        content = json.dumps(data, indent=2, ensure_ascii=False)

        if self.quota_bytes:
            size = len(content.encode('utf-8'))
            if size > self.quota_bytes:
                raise StorageQuotaExceededError(size, self.quota_bytes)

        try:
            self.storage_file.parent.mkdir(parents=True, exist_ok=True)
            self.storage_file.write_text(content, encoding='utf-8')
        except OSError as e:
            raise StorageWriteError(f"写入存储文件失败: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        """
        读取键值

        Raises:
            StorageParseError: 存储文件损坏
        """
        value = self._load_data().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageParseError(f"键 {key} 的值不是字符串")
        return value

    def set_item(self, key: str, value: str):
        """
        写入键值（覆盖旧值）

        存储文件损坏时丢弃旧内容重新写入

        Raises:
            StorageWriteError: 写入失败或超出配额
        """
        try:
            data = self._load_data()
        except StorageParseError as e:
            logger.warning(f"⚠️ 存储文件损坏，将被覆盖: {e}")
            data = {}

        data[key] = value
        self._save_data(data)

    def remove_item(self, key: str):
        """删除键"""
        data = self._load_data()
        if data.pop(key, None) is not None:
            self._save_data(data)
