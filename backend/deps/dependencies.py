# -*- coding: utf-8 -*-
"""
依赖项 - Alba NihonGo
用于 FastAPI 路由的依赖注入
"""

import logging
from pathlib import Path
from typing import Optional

from config.settings import settings
from models.vocab_models import DuplicatePolicy
from services.app_controller import AppController
from services.deck.collection_store import CollectionStore
from services.deck.local_storage import LocalStorage
from services.word_lookup.dictionary_agent import DictionaryAgent
from services.word_lookup.speech_agent import SentenceSpeechAgent
from utils.api_config_loader import api_config_loader

logger = logging.getLogger(__name__)

_controller: Optional[AppController] = None


def build_speech_agent() -> Optional[SentenceSpeechAgent]:
    """根据配置创建语音合成Agent，未启用时返回None"""
    if not api_config_loader.is_speech_enabled():
        return None

    config = api_config_loader.get_speech_config()
    return SentenceSpeechAgent(
        api_key=config['api_key'],
        base_url=config['base_url'],
        model=config.get('model', 'tts-1'),
        voice=config.get('voice', 'alloy'),
        timeout=config.get('timeout', 15)
    )


def build_dictionary_agent() -> DictionaryAgent:
    """根据配置创建词典Agent"""
    config = api_config_loader.get_dictionary_config()

    return DictionaryAgent(
        api_key=config.get('api_key', ''),
        base_url=config.get('base_url', 'https://generativelanguage.googleapis.com/v1beta/openai'),
        model=config.get('model', 'gemini-2.5-flash'),
        timeout=config.get('timeout', 30),
        max_tokens=config.get('max_tokens', 1200),
        speech_agent=build_speech_agent()
    )


def build_controller() -> AppController:
    """根据配置创建应用控制器（会从存储加载卡组）"""
    storage = LocalStorage(Path(settings.storage_file), quota_bytes=settings.storage_quota_bytes)
    store = CollectionStore(storage, key=settings.deck_storage_key)

    dictionary_ready = api_config_loader.is_dictionary_enabled()
    if not dictionary_ready:
        logger.warning("⚠️ 词典服务未配置 API_KEY，查询将失败")

    return AppController(
        lookup_client=build_dictionary_agent(),
        store=store,
        duplicate_policy=DuplicatePolicy(settings.duplicate_policy),
        dictionary_ready=dictionary_ready,
        game_pair_count=settings.game_pair_count,
        game_flip_back_delay=settings.game_flip_back_delay
    )


def get_controller() -> AppController:
    """
    获取应用控制器（依赖注入）

    单用户进程，全局只有一个控制器实例
    """
    global _controller
    if _controller is None:
        _controller = build_controller()
    return _controller
