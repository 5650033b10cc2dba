# -*- coding: utf-8 -*-
"""
记忆配对游戏数据模型 - Alba NihonGo
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class GamePhase(str, Enum):
    """游戏状态机"""
    IDLE = "idle"
    AWAITING_FIRST_PICK = "awaiting_first_pick"
    AWAITING_SECOND_PICK = "awaiting_second_pick"
    RESOLVING = "resolving"
    COMPLETE = "complete"


class TileKind(str, Enum):
    """牌面类型"""
    KANJI = "kanji"
    MEANING = "meaning"


class TileState(str, Enum):
    """牌的状态"""
    HIDDEN = "hidden"
    REVEALED = "revealed"
    MATCHED = "matched"


class GameTile(BaseModel):
    """游戏中的一张牌"""
    tile_id: int
    card_id: str  # 来源卡片ID，同一卡片的两张牌配对
    kind: TileKind
    face: str
    state: TileState = TileState.HIDDEN


class TileView(BaseModel):
    """对外展示的牌（未翻开的牌不显示内容）"""
    tile_id: int
    kind: TileKind
    state: TileState
    face: Optional[str] = None


class GameSnapshot(BaseModel):
    """游戏状态快照"""
    phase: GamePhase
    tiles: List[TileView] = Field(default_factory=list)
    moves: int = 0
    matched_pairs: int = 0
    total_pairs: int = 0
