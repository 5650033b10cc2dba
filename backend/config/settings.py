"""
Alba NihonGo Backend Configuration Settings
配置管理模块，负责加载环境变量和项目设置
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

BACKEND_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """应用程序设置类"""

    # 服务器配置
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "true").lower() == "true"

    # 日志配置
    log_level: str = os.getenv("LOG_LEVEL", "info")

    # 卡组存储配置（模拟浏览器 localStorage）
    storage_file: str = os.getenv("STORAGE_FILE", str(BACKEND_DIR / "data" / "local_storage.json"))
    deck_storage_key: str = os.getenv("DECK_STORAGE_KEY", "nihongo_deck")
    storage_quota_bytes: int = int(os.getenv("STORAGE_QUOTA_BYTES", str(5 * 1024 * 1024)))

    # 重复收藏策略: allow / block / merge
    duplicate_policy: str = os.getenv("DUPLICATE_POLICY", "allow")

    # 记忆游戏配置
    game_pair_count: int = int(os.getenv("GAME_PAIR_COUNT", "6"))
    game_flip_back_delay: float = float(os.getenv("GAME_FLIP_BACK_DELAY", "1.0"))

    # 项目信息
    app_name: str = "Alba NihonGo Backend"
    version: str = "1.0.0"
    description: str = "Alba NihonGo Dictionary - Japanese vocabulary flashcards backend"

    class Config:
        env_file = ".env"
        extra = "ignore"

# 全局设置实例
settings = Settings()
