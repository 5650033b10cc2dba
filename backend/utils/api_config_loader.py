# -*- coding: utf-8 -*-
"""
API配置加载器 - Alba NihonGo
从 YAML 文件中加载第三方API配置
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class APIConfigLoader:
    """API配置加载器"""

    def __init__(self, config_file: Optional[Path] = None):
        """
        初始化配置加载器

        Args:
            config_file: 配置文件路径，默认为 backend/config/external_apis.yaml
        """
        if config_file is None:
            backend_dir = Path(__file__).parent.parent
            config_file = backend_dir / "config" / "external_apis.yaml"
        self.config_file = Path(config_file)

        # 加载配置
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """从YAML文件加载配置"""
        try:
            if not self.config_file.exists():
                logger.warning(f"⚠️ 配置文件不存在: {self.config_file}")
                return {}

            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
                logger.info(f"✅ API配置加载成功: {self.config_file}")
                return config or {}

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"❌ 加载配置文件失败: {e}")
            return {}

    def get_dictionary_config(self) -> Dict[str, Any]:
        """获取词典API配置（api_key 为空时使用环境变量 API_KEY）"""
        config = dict(self.config.get('dictionary') or {})
        if not config.get('api_key'):
            config['api_key'] = os.getenv('API_KEY', '')
        return config

    def get_speech_config(self) -> Dict[str, Any]:
        """获取语音合成API配置"""
        config = dict(self.config.get('speech') or {})
        if not config.get('api_key'):
            config['api_key'] = os.getenv('API_KEY', '')
        return config

    def is_dictionary_enabled(self) -> bool:
        """词典服务是否启用且已配置密钥"""
        config = self.get_dictionary_config()
        return bool(config.get('enabled', False) and config.get('api_key'))

    def is_speech_enabled(self) -> bool:
        """语音合成是否启用"""
        config = self.get_speech_config()
        return bool(config.get('enabled', False) and config.get('api_key'))


# 创建全局单例
api_config_loader = APIConfigLoader()
