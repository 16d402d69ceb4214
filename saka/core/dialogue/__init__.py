"""대화 시스템 Core 패키지

챕터 그래프 모델 + 인터프리터 + 오프라인 검증.
"""

from saka.core.dialogue.characters import KNOWN_CHARACTERS, CharacterPortrait
from saka.core.dialogue.engine import DialogueEngine
from saka.core.dialogue.models import Chapter, DialogueChoice, DialogueLine
from saka.core.dialogue.registry import ChapterRegistry
from saka.core.dialogue.validation import (
    MAX_PATH_DEPTH,
    ChapterReport,
    PathWalkResult,
    check_battles,
    check_competing_continuations,
    check_references,
    check_speakers,
    check_start_node,
    count_terminal_nodes,
    find_reachable,
    find_unreachable,
    validate_chapter,
    walk_first_choices,
    walk_paths,
)

__all__ = [
    # models
    "Chapter",
    "DialogueChoice",
    "DialogueLine",
    "CharacterPortrait",
    "KNOWN_CHARACTERS",
    # runtime
    "DialogueEngine",
    "ChapterRegistry",
    # validation
    "MAX_PATH_DEPTH",
    "ChapterReport",
    "PathWalkResult",
    "check_start_node",
    "check_references",
    "find_reachable",
    "find_unreachable",
    "count_terminal_nodes",
    "walk_paths",
    "check_speakers",
    "check_battles",
    "check_competing_continuations",
    "walk_first_choices",
    "validate_chapter",
]
