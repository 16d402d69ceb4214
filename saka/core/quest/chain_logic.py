"""퀘스트 체인 정의 + 완료 판정 + 저장 데이터 재조정"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .enums import QuestType
from .models import Quest, QuestLedgerState

logger = logging.getLogger(__name__)

# 게임 시작 연출로 자동 완료되는 첫 퀘스트
OPENING_QUEST_ID = "discover-unit94"


def build_default_chain() -> list[Quest]:
    """Arc 1 퀘스트 체인. 매번 새 객체를 만든다 (저장 데이터는 신뢰하지 않음)."""
    return [
        Quest(
            id=OPENING_QUEST_ID,
            title="Bilik Dimeterai",
            description="Sesuatu berlaku di Unit 9-4...",
            quest_type=QuestType.MAIN.value,
            target_location="unit-9-4",
            is_complete=True,  # Chapter 1에서 자동 완료
        ),
        Quest(
            id="meet-dian",
            title="Suara di Tangga",
            description="Siapa yang menangis di tangga tingkat 9?",
            quest_type=QuestType.MAIN.value,
            target_location="tangga",
        ),
        Quest(
            id="first-hunt",
            title="Saka Lapar",
            description="Benda dalam kau lapar. Kena tangkap sesuatu.",
            quest_type=QuestType.HUNT.value,
            target_location="tangga",
        ),
        Quest(
            id="find-zafri",
            title="Cucu Bomoh",
            description="Ada orang kat kedai yang tahu pasal benda-benda ni.",
            quest_type=QuestType.MAIN.value,
            target_location="kedai-runcit",
        ),
        Quest(
            id="collect-3-spirits",
            title="Pemburu Hantu",
            description="Tangkap 3 makhluk untuk kuatkan saka.",
            quest_type=QuestType.HUNT.value,
        ),
        Quest(
            id="return-unit94",
            title="Rahsia Unit 9-4",
            description="Ada lagi botol-botol dalam bilik tu...",
            quest_type=QuestType.MAIN.value,
            target_location="unit-9-4",
        ),
        Quest(
            id="rooftop-boss",
            title="Puncak PPR",
            description="Sesuatu menunggu di atas.",
            quest_type=QuestType.MAIN.value,
            target_location="rooftop",
        ),
    ]


def build_default_ledger() -> QuestLedgerState:
    chain = build_default_chain()
    return QuestLedgerState(
        chain=chain,
        completed_quests=[q.id for q in chain if q.is_complete],
    )


# --- 완료 조건표 (퀘스트별 고정 술어) ---


def _event_is(name: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda context: context.get("event") == name


def _captured_at_least(count: int) -> Callable[[Mapping[str, Any]], bool]:
    def predicate(context: Mapping[str, Any]) -> bool:
        value = context.get("captured_spirits_count", 0)
        return isinstance(value, int) and value >= count

    return predicate


COMPLETION_PREDICATES: dict[str, Callable[[Mapping[str, Any]], bool]] = {
    "meet-dian": _event_is("met-dian"),
    "first-hunt": _event_is("first-spirit-captured"),
    "find-zafri": _event_is("met-zafri"),
    "collect-3-spirits": _captured_at_least(3),
    "return-unit94": _event_is("unit-94-explored-again"),
    "rooftop-boss": _event_is("rooftop-boss-defeated"),
}


def is_completion_met(quest_id: str, context: Mapping[str, Any]) -> bool:
    """퀘스트 완료 술어 평가. 표에 없는 퀘스트는 항상 False."""
    predicate = COMPLETION_PREDICATES.get(quest_id)
    if predicate is None:
        return False
    return predicate(context)


def mark_complete(state: QuestLedgerState, quest_id: str) -> None:
    """완료 처리. active 포인터는 따로 두지 않으므로 체인에서 자동 재도출된다."""
    for quest in state.chain:
        if quest.id == quest_id:
            quest.is_complete = True
            break
    if quest_id not in state.completed_quests:
        state.completed_quests.append(quest_id)


# --- 저장 데이터 ---


def ledger_to_dict(state: QuestLedgerState) -> dict[str, Any]:
    active = state.active_quest
    return {
        "completed_quests": list(state.completed_quests),
        # 정보용. 로드 시에는 무시하고 재도출한다.
        "active_quest_id": active.id if active else None,
    }


def reconcile_ledger(saved: Mapping[str, Any] | None) -> QuestLedgerState:
    """저장된 완료 ID를 새로 만든 체인 위에 복원.

    - 체인 정의는 항상 코드에서 다시 만든다
    - 현재 체인에 없는 ID는 버린다 (체인 편집 대응)
    - 첫 퀘스트는 항상 완료
    - 구버전 키 completedQuests도 받는다
    """
    state = build_default_ledger()
    if not saved:
        return state

    raw_completed = saved.get("completed_quests", saved.get("completedQuests"))
    if not isinstance(raw_completed, list):
        return state

    known_ids = {q.id for q in state.chain}
    restored: list[str] = [OPENING_QUEST_ID]
    for quest_id in raw_completed:
        if not isinstance(quest_id, str):
            continue
        if quest_id not in known_ids:
            logger.info("Dropping unknown quest id from save: %s", quest_id)
            continue
        if quest_id not in restored:
            restored.append(quest_id)

    for quest in state.chain:
        quest.is_complete = quest.id in restored
    state.completed_quests = restored
    return state
