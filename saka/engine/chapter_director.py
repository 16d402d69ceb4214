"""ChapterDirector — 챕터 진행 + 챕터 종료 후 흐름 결정

engine 컴포넌트. DialogueEngine을 구동하고, 챕터가 끝나면
스토리 부수효과 표(CHAPTER_EFFECTS)를 진행 상태/퀘스트 원장에 적용한 뒤
다음 흐름(LoadChapter / StartBattle / ReturnToHub)을 돌려준다.

engine → service 방향이므로 두 Service를 직접 참조해도 된다.
Service끼리는 서로 모른다.
"""

import logging
from typing import Any, Optional

from saka.core.dialogue.engine import DialogueEngine
from saka.core.dialogue.models import Chapter, DialogueLine
from saka.core.dialogue.registry import ChapterRegistry
from saka.core.event_bus import EventBus, GameEvent
from saka.core.event_types import EventTypes
from saka.core.progress.models import DEFAULT_RESTORE_AMOUNT
from saka.core.story.models import (
    ChapterOutcome,
    LoadChapter,
    ReturnToHub,
    StartBattle,
)
from saka.core.story.routing import build_location_context, chapter_for_location
from saka.core.story.tables import (
    BATTLE_RETURN_CHAPTERS,
    BATTLE_VICTORY_EVENTS,
    FIRST_BATTLE_EVENT,
    FIRST_CAPTURE_EVENT,
    effects_for,
)
from saka.services.progress_service import ProgressService
from saka.services.quest_service import QuestService

logger = logging.getLogger(__name__)


class ChapterDirector:
    """챕터 1개 재생 + 종료 처리"""

    def __init__(
        self,
        registry: ChapterRegistry,
        progress: ProgressService,
        quests: QuestService,
        event_bus: EventBus,
    ) -> None:
        self._registry = registry
        self._progress = progress
        self._quests = quests
        self._bus = event_bus
        self._engine = DialogueEngine()
        self._finished = False  # 로드된 챕터의 종료 처리 완료 여부
        self._resolved_battle: Optional[StartBattle] = None

    @property
    def engine(self) -> DialogueEngine:
        return self._engine

    @property
    def chapter(self) -> Optional[Chapter]:
        return self._engine.chapter

    # === 재생 ===

    def start_chapter(self, chapter_id: str) -> Optional[Chapter]:
        """챕터 로드 + 시작. 등록되지 않은 ID면 None (현재 챕터 유지)."""
        chapter = self._registry.get(chapter_id)
        if chapter is None:
            logger.warning("Unknown chapter: %s", chapter_id)
            return None

        self._engine.load_chapter(chapter)
        self._finished = False
        self._progress.set_current_chapter(chapter_id)
        line = self._engine.start()
        logger.info("Chapter started: %s", chapter_id)

        self._emit(EventTypes.CHAPTER_STARTED, {"chapter_id": chapter_id})
        self._emit_line_triggers(line)
        return chapter

    def advance(self) -> Optional[DialogueLine]:
        before = self._engine.get_current_line()
        line = self._engine.advance()
        if line is not None and line is not before:
            self._emit_line_triggers(line)
        return line

    def choose(self, index: int) -> Optional[DialogueLine]:
        before = self._engine.get_current_line()
        line = self._engine.choose(index)
        if line is not None and line is not before:
            self._emit_line_triggers(line)
        return line

    def _emit_line_triggers(self, line: Optional[DialogueLine]) -> None:
        """노드의 연출 태그를 호스트 트리거로 발행"""
        if line is None:
            return
        if line.effect:
            self._emit(
                EventTypes.NARRATIVE_EFFECT,
                {"effect": line.effect, "node_id": line.id},
            )
        if line.background:
            self._emit(
                EventTypes.BACKGROUND_CHANGED,
                {"background": line.background, "node_id": line.id},
            )
        if line.enemy:
            self._emit(
                EventTypes.ENEMY_SHOWN,
                {"enemy_id": line.enemy, "node_id": line.id},
            )

    # === 종료 처리 ===

    def finish_chapter(self) -> Optional[ChapterOutcome]:
        """대화가 끝났을 때 다음 흐름.

        아직 진행 중이거나, 이 챕터의 종료 처리가 이미 끝났으면 None.
        종료 처리는 챕터 로드 1회당 한 번만 일어난다.
        """
        chapter = self._engine.chapter
        if chapter is None or not self._engine.is_end():
            return None
        if self._finished:
            logger.warning("Chapter already finished: %s", chapter.id)
            return None
        self._finished = True

        line = self._engine.get_current_line()
        if line is not None and line.battle:
            trigger = StartBattle(
                enemy_id=line.battle,
                source_chapter=chapter.id,
                return_chapter=BATTLE_RETURN_CHAPTERS.get(chapter.id),
            )
            logger.info("Battle requested: %s (from %s)", line.battle, chapter.id)
            self._emit(
                EventTypes.BATTLE_REQUESTED,
                {
                    "enemy_id": trigger.enemy_id,
                    "source_chapter": trigger.source_chapter,
                    "return_chapter": trigger.return_chapter,
                },
            )
            return trigger

        return self.complete_chapter(chapter.id)

    def complete_chapter(self, chapter_id: str) -> ChapterOutcome:
        next_chapter = self._apply_completion(chapter_id)
        return self._route(next_chapter)

    def finish_battle(
        self, trigger: StartBattle, victory: bool, captured: bool = False
    ) -> Optional[ChapterOutcome]:
        """전투 결과 반영. 이미 결과를 반영한 트리거면 None.

        패배: 아무것도 기록하지 않고 허브로.
        승리: 원래 챕터 완료 처리 → 승리 이벤트 → (포획 시) 포획 기록.
        return_chapter가 있으면 그 챕터로 복귀.
        """
        if trigger is self._resolved_battle:
            logger.warning("Battle already resolved: %s", trigger.enemy_id)
            return None
        self._resolved_battle = trigger

        enemy_id = trigger.enemy_id
        self._emit(
            EventTypes.BATTLE_FINISHED,
            {"enemy_id": enemy_id, "victory": victory, "captured": captured},
        )

        if not victory:
            logger.info("Battle lost: %s", enemy_id)
            return self._route(None)

        next_chapter = self._apply_completion(trigger.source_chapter)

        for event_id in (FIRST_BATTLE_EVENT, *BATTLE_VICTORY_EVENTS.get(enemy_id, ())):
            self._progress.complete_event(event_id)
            self._quests.update_quest_progress(self._quest_context(event_id))

        if captured:
            first_capture = not self._progress.get_game_state().captured_spirits
            if self._progress.capture_spirit(enemy_id) and first_capture:
                self._progress.complete_event(FIRST_CAPTURE_EVENT)
                self._quests.update_quest_progress(
                    self._quest_context(FIRST_CAPTURE_EVENT)
                )
            self._quests.update_quest_progress(self._quest_context(None))

        if trigger.return_chapter:
            return LoadChapter(trigger.return_chapter)
        return self._route(next_chapter)

    def _apply_completion(self, chapter_id: str) -> Optional[str]:
        """완료 이벤트 + 부수효과 표 적용. 튜토리얼 다음 챕터 반환."""
        progress = self._progress
        quests = self._quests

        progress.complete_event(f"{chapter_id}-complete")
        progress.set_current_chapter(chapter_id)

        effects = effects_for(chapter_id)
        for event_id in effects.events:
            progress.complete_event(event_id)
        for quest_id in effects.complete_quests:
            if not quests.is_quest_complete(quest_id):
                quests.complete_quest(quest_id)
        for location_id in effects.unlock_locations:
            progress.unlock_location(location_id)
        for companion, amount in effects.bonds:
            progress.increase_bond(companion, amount)
        if effects.complete_tutorial:
            progress.complete_tutorial()

        for event_id in effects.events:
            quests.update_quest_progress(self._quest_context(event_id))

        logger.info("Chapter completed: %s", chapter_id)
        self._emit(EventTypes.CHAPTER_COMPLETED, {"chapter_id": chapter_id})
        return progress.get_next_chapter()

    def _route(self, next_chapter: Optional[str]) -> ChapterOutcome:
        if next_chapter:
            return LoadChapter(next_chapter)
        self._emit(EventTypes.HUB_REQUESTED, {})
        return ReturnToHub()

    def _quest_context(self, event_id: Optional[str]) -> dict[str, Any]:
        context: dict[str, Any] = {
            "captured_spirits_count": len(
                self._progress.get_game_state().captured_spirits
            ),
        }
        if event_id:
            context["event"] = event_id
        return context

    # === 허브 행동 ===

    def visit_location(self, location_id: str) -> str:
        """장소 방문: 퀘스트 진행 → 시간 진행 → 재생할 챕터 ID"""
        state = self._progress.get_game_state()
        context = build_location_context(location_id, state)
        if self._quests.update_quest_progress(context):
            logger.info("Quest progressed by visiting %s", location_id)

        self._progress.advance_time(self._quests.snapshot())
        chapter_id = chapter_for_location(location_id, self._progress.get_game_state())
        logger.info("Visit %s -> %s", location_id, chapter_id)
        return chapter_id

    def rest(self) -> None:
        self._progress.advance_time(self._quests.snapshot())
        self._progress.restore_hunger(DEFAULT_RESTORE_AMOUNT)

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        self._bus.emit(
            GameEvent(event_type=event_type, data=data, source="chapter_director")
        )
