"""퀘스트 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Quest:
    """퀘스트 체인의 한 단계"""

    id: str
    title: str
    description: str
    quest_type: str = "main"  # QuestType 값
    target_location: Optional[str] = None
    is_complete: bool = False


@dataclass
class QuestProgress:
    """진행 상태(ProgressService)에 넘기는 읽기 전용 스냅샷

    장소 해금 판정에만 쓰인다. ID만 담는다.
    """

    active_quest_id: Optional[str] = None
    completed_quest_ids: frozenset[str] = field(default_factory=frozenset)

    def is_complete(self, quest_id: str) -> bool:
        return quest_id in self.completed_quest_ids

    def is_active(self, quest_id: str) -> bool:
        return self.active_quest_id == quest_id


@dataclass
class QuestLedgerState:
    """원장 상태. active는 저장하지 않고 항상 chain + completed에서 도출."""

    chain: list[Quest] = field(default_factory=list)
    completed_quests: list[str] = field(default_factory=list)

    @property
    def active_quest(self) -> Optional[Quest]:
        for quest in self.chain:
            if not quest.is_complete:
                return quest
        return None
