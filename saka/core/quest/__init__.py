"""퀘스트 원장 Core 패키지"""

from saka.core.quest.chain_logic import (
    COMPLETION_PREDICATES,
    OPENING_QUEST_ID,
    build_default_chain,
    build_default_ledger,
    is_completion_met,
    ledger_to_dict,
    mark_complete,
    reconcile_ledger,
)
from saka.core.quest.enums import QuestType
from saka.core.quest.models import Quest, QuestLedgerState, QuestProgress

__all__ = [
    # enums
    "QuestType",
    # models
    "Quest",
    "QuestLedgerState",
    "QuestProgress",
    # chain
    "OPENING_QUEST_ID",
    "COMPLETION_PREDICATES",
    "build_default_chain",
    "build_default_ledger",
    "is_completion_met",
    "mark_complete",
    "ledger_to_dict",
    "reconcile_ledger",
]
