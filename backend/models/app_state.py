# -*- coding: utf-8 -*-
"""
应用状态快照 - Alba NihonGo
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, computed_field

from models.vocab_models import SavedCard, ViewState, VocabularyData, same_headword


class AppState(BaseModel):
    """应用状态（不可变快照，每次状态变化生成新实例）"""
    model_config = ConfigDict(frozen=True)

    query: str = ""
    loading: bool = False
    error: Optional[str] = None
    current_card: Optional[VocabularyData] = None
    collection: Tuple[SavedCard, ...] = ()
    view: ViewState = ViewState.SEARCH
    dictionary_ready: bool = False

    @computed_field
    @property
    def current_card_saved(self) -> bool:
        """当前查询结果是否已在卡组中"""
        if self.current_card is None:
            return False
        return any(same_headword(card, self.current_card) for card in self.collection)

    @computed_field
    @property
    def collection_size(self) -> int:
        return len(self.collection)
