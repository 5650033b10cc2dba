# -*- coding: utf-8 -*-
"""
请求/响应模型 - Alba NihonGo
"""

from typing import List, Optional

from pydantic import BaseModel

from models.app_state import AppState
from models.vocab_models import SavedCard, SaveOutcome, ViewState


class SearchRequest(BaseModel):
    """查询请求模型"""
    query: str

    class Config:
        json_schema_extra = {
            "example": {
                "query": "cat"
            }
        }


class ViewRequest(BaseModel):
    """视图切换请求模型"""
    view: ViewState


class FavoriteRequest(BaseModel):
    """收藏标记请求模型（不传 value 时切换）"""
    value: Optional[bool] = None


class SaveCardResponse(BaseModel):
    """收藏卡片响应模型"""
    outcome: SaveOutcome
    state: AppState


class DeckListResponse(BaseModel):
    """卡组列表响应模型"""
    cards: List[SavedCard]
    total: int
