# -*- coding: utf-8 -*-
"""
查询与视图路由 - Alba NihonGo
提供应用状态、视图切换和单词查询接口
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from deps.dependencies import get_controller
from models.app_state import AppState
from schemas.deck_schemas import SearchRequest, ViewRequest
from services.app_controller import AppController

logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(prefix="/api", tags=["search"])


@router.get("/state", response_model=AppState)
async def get_state(controller: AppController = Depends(get_controller)):
    """获取当前应用状态"""
    return controller.state


@router.post("/view", response_model=AppState)
async def change_view(request: ViewRequest, controller: AppController = Depends(get_controller)):
    """
    切换视图（search / collection / game）

    切换到 game 时会用当前卡组开始新的记忆游戏
    """
    return controller.navigate(request.view)


@router.post("/search", response_model=AppState)
async def search_word(request: SearchRequest, controller: AppController = Depends(get_controller)):
    """
    查询单词

    空查询不会发起请求，直接返回当前状态。
    查不到或连接失败时错误信息写在 state.error 中。

    Args:
        request: 查询请求

    Returns:
        AppState: 查询结束后的状态
    """
    logger.info(f"📖 收到单词查询请求: {request.query}")

    try:
        return await controller.submit_search(request.query)
    except Exception as e:
        logger.exception("❌ 查询单词异常")
        raise HTTPException(status_code=500, detail=f"查询失败: {str(e)}")
