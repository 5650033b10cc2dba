# -*- coding: utf-8 -*-
"""
记忆游戏路由 - Alba NihonGo
"""

from fastapi import APIRouter, Depends, HTTPException

from core.errors import NotEnoughCardsError
from deps.dependencies import get_controller
from models.game_models import GameSnapshot
from services.app_controller import AppController
from services.game.memory_game import MemoryGame

# 创建路由器
router = APIRouter(prefix="/api/game", tags=["game"])


def _current_game(controller: AppController) -> MemoryGame:
    if controller.game is None:
        raise HTTPException(status_code=404, detail="没有进行中的游戏")
    return controller.game


@router.post("/start", response_model=GameSnapshot)
async def start_game(controller: AppController = Depends(get_controller)):
    """
    用当前卡组开始新游戏

    Raises:
        HTTPException: 400 - 卡片不足
    """
    try:
        game = controller.start_game()
    except NotEnoughCardsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return game.snapshot()


@router.get("", response_model=GameSnapshot)
async def get_game(controller: AppController = Depends(get_controller)):
    """获取游戏状态"""
    return _current_game(controller).snapshot()


@router.post("/pick/{tile_id}", response_model=GameSnapshot)
async def pick_tile(tile_id: int, controller: AppController = Depends(get_controller)):
    """翻开一张牌"""
    return _current_game(controller).pick(tile_id)


@router.post("/resolve", response_model=GameSnapshot)
async def resolve_mismatch(controller: AppController = Depends(get_controller)):
    """立即翻回配对失败的两张牌"""
    return _current_game(controller).resolve()
