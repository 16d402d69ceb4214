"""분기 대화 인터프리터

현재 노드는 Optional[DialogueLine]. 잘못된 참조는 예외 없이 None이 되고,
None은 모든 조회에서 "종료" 상태로 취급된다.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import Chapter, DialogueLine

logger = logging.getLogger(__name__)


class DialogueEngine:
    """챕터 1개를 로드해서 현재 노드를 추적하는 상태 머신"""

    def __init__(self) -> None:
        self._chapter: Optional[Chapter] = None
        self._current: Optional[DialogueLine] = None
        self._flags: dict[str, bool] = {}

    @property
    def chapter(self) -> Optional[Chapter]:
        return self._chapter

    def load_chapter(self, chapter: Chapter) -> None:
        """챕터 교체. 현재 노드와 세션 플래그 초기화. 검증하지 않음."""
        self._chapter = chapter
        self._current = None
        self._flags = {}

    def start(self) -> Optional[DialogueLine]:
        if self._chapter is None:
            return None
        self._current = self._chapter.get_line(self._chapter.start_node)
        if self._current is None:
            logger.warning(
                "Chapter %s: start node '%s' missing",
                self._chapter.id,
                self._chapter.start_node,
            )
        return self._current

    def advance(self) -> Optional[DialogueLine]:
        """선형 진행.

        선택지 대기 중이면 현재 노드를 그대로 반환 (호출자는 has_choices()로 먼저 거른다).
        종료 노드면 None.
        """
        if self._chapter is None or self._current is None:
            return None
        if self._current.has_choices:
            return self._current
        if not self._current.next:
            return None
        self._current = self._move_to(self._current.next)
        return self._current

    def choose(self, index: int) -> Optional[DialogueLine]:
        """선택지 선택. 범위 밖 index는 무시 (현재 노드 유지, None 반환)."""
        if self._chapter is None or self._current is None:
            return None
        choices = self._current.choices
        if not choices or index < 0 or index >= len(choices):
            return None

        choice = choices[index]
        if choice.flag:
            self._flags[choice.flag] = True
        self._current = self._move_to(choice.next)
        return self._current

    def get_current_line(self) -> Optional[DialogueLine]:
        return self._current

    def has_choices(self) -> bool:
        return self._current is not None and self._current.has_choices

    def is_end(self) -> bool:
        if self._chapter is None or self._current is None:
            return True
        return self._current.is_terminal

    def get_flag(self, name: str) -> bool:
        return self._flags.get(name, False)

    def get_chapter_title(self) -> str:
        return self._chapter.title if self._chapter is not None else ""

    def get_chapter_title_malay(self) -> str:
        return self._chapter.title_malay if self._chapter is not None else ""

    def _move_to(self, node_id: str) -> Optional[DialogueLine]:
        line = self._chapter.get_line(node_id) if self._chapter else None
        if line is None:
            # 검증기가 잡아야 할 저작 오류. 런타임은 종료로 강등.
            logger.warning(
                "Chapter %s: dangling reference to '%s', ending dialogue",
                self._chapter.id if self._chapter else "?",
                node_id,
            )
        return line
