# -*- coding: utf-8 -*-
"""
API Schemas 模块
"""

from .deck_schemas import (
    SearchRequest,
    ViewRequest,
    FavoriteRequest,
    SaveCardResponse,
    DeckListResponse,
)

__all__ = [
    "SearchRequest",
    "ViewRequest",
    "FavoriteRequest",
    "SaveCardResponse",
    "DeckListResponse",
]
