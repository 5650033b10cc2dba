# -*- coding: utf-8 -*-
"""
卡组路由 - Alba NihonGo
提供卡片收藏、喜欢标记和删除接口
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from deps.dependencies import get_controller
from models.app_state import AppState
from schemas.deck_schemas import DeckListResponse, FavoriteRequest, SaveCardResponse
from services.app_controller import AppController

logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(prefix="/api/deck", tags=["deck"])


@router.get("", response_model=DeckListResponse)
async def list_cards(controller: AppController = Depends(get_controller)):
    """获取卡组（新卡在前）"""
    cards = list(controller.state.collection)
    return DeckListResponse(cards=cards, total=len(cards))


@router.post("/save", response_model=SaveCardResponse)
async def save_current_card(controller: AppController = Depends(get_controller)):
    """
    收藏当前查询结果

    保存前会去除例句音频。重复卡片的处理取决于 duplicate_policy。
    """
    outcome = controller.save_current_card()
    logger.info(f"⭐ 收藏当前卡片: {outcome.value}")
    return SaveCardResponse(outcome=outcome, state=controller.state)


@router.post("/{card_id}/favorite", response_model=AppState)
async def mark_favorite(
    card_id: str,
    request: Optional[FavoriteRequest] = None,
    controller: AppController = Depends(get_controller)
):
    """
    设置或切换喜欢标记

    Args:
        card_id: 卡片ID
        request: value 为空时切换当前标记
    """
    if controller.store.get(card_id) is None:
        raise HTTPException(status_code=404, detail="卡片不存在")

    if request is None or request.value is None:
        return controller.toggle_favorite(card_id)
    return controller.set_favorite(card_id, request.value)


@router.delete("/{card_id}", response_model=AppState)
async def delete_card(card_id: str, controller: AppController = Depends(get_controller)):
    """删除卡片"""
    if controller.store.get(card_id) is None:
        raise HTTPException(status_code=404, detail="卡片不存在")

    logger.info(f"🗑️ 删除卡片: {card_id}")
    return controller.remove_card(card_id)
