"""Game API endpoints — 진행 상태, 대화 재생, 전투 결과"""

from fastapi import APIRouter, Depends, HTTPException, Request

from saka.api.schemas import (
    BattleResultRequest,
    ChoiceInfo,
    ChooseRequest,
    DialogueResponse,
    ErrorResponse,
    FinishResponse,
    GameStateResponse,
    LineInfo,
    LocationResponse,
    OutcomeInfo,
    QuestInfo,
    QuestResponse,
    StartChapterRequest,
    TriggerInfo,
    VisitResponse,
)
from saka.core.dialogue.models import DialogueLine
from saka.core.logging import get_logger
from saka.core.story.models import ChapterOutcome, LoadChapter, StartBattle
from saka.engine.game_session import GameSession

logger = get_logger(__name__)

router = APIRouter(prefix="/game", tags=["game"])
dialogue_router = APIRouter(prefix="/dialogue", tags=["dialogue"])
battle_router = APIRouter(prefix="/battle", tags=["battle"])


def get_game_session(request: Request) -> GameSession:
    """GameSession 인스턴스 반환 (의존성 주입)"""
    session: GameSession = request.app.state.game_session
    return session


# === 변환 ===


def _triggers(session: GameSession) -> list[TriggerInfo]:
    return [
        TriggerInfo(type=event.event_type, data=event.data)
        for event in session.drain_triggers()
    ]


def _build_line_info(line: DialogueLine) -> LineInfo:
    return LineInfo(
        id=line.id,
        text=line.text,
        speaker=line.speaker,
        expression=line.expression,
        effect=line.effect,
        background=line.background,
        enemy=line.enemy,
        battle=line.battle,
        choices=[
            ChoiceInfo(index=i, text=choice.text)
            for i, choice in enumerate(line.choices)
        ],
    )


def _build_dialogue_response(session: GameSession) -> DialogueResponse:
    engine = session.director.engine
    chapter = engine.chapter
    line = engine.get_current_line()
    return DialogueResponse(
        chapter_id=chapter.id if chapter else None,
        title=engine.get_chapter_title(),
        title_malay=engine.get_chapter_title_malay(),
        line=_build_line_info(line) if line else None,
        is_end=engine.is_end(),
        has_choices=engine.has_choices(),
        triggers=_triggers(session),
    )


def _build_outcome_info(outcome: ChapterOutcome) -> OutcomeInfo:
    if isinstance(outcome, StartBattle):
        return OutcomeInfo(
            kind=outcome.kind,
            enemy_id=outcome.enemy_id,
            source_chapter=outcome.source_chapter,
            return_chapter=outcome.return_chapter,
        )
    if isinstance(outcome, LoadChapter):
        return OutcomeInfo(kind=outcome.kind, chapter_id=outcome.chapter_id)
    return OutcomeInfo(kind=outcome.kind)


def _build_state_response(session: GameSession) -> GameStateResponse:
    progress = session.progress
    state = progress.get_game_state()
    return GameStateResponse(
        day=state.day,
        time_slot=state.time_slot.value,
        time_display=progress.get_time_display(),
        hunger=state.hunger,
        captured_spirits=state.captured_spirits,
        unlocked_locations=state.unlocked_locations,
        completed_events=state.completed_events,
        social_bonds=state.social_bonds,
        current_chapter=state.current_chapter,
        tutorial_completed=state.tutorial_completed,
        should_go_to_hub=progress.should_go_to_hub(),
        triggers=_triggers(session),
    )


def _require_chapter(session: GameSession) -> None:
    if not session.has_chapter():
        raise HTTPException(status_code=409, detail="No chapter loaded")


# === /game ===


@router.get("/state", response_model=GameStateResponse)
def get_game_state(
    session: GameSession = Depends(get_game_session),
) -> GameStateResponse:
    """현재 진행 상태 조회"""
    return _build_state_response(session)


@router.post("/new", response_model=GameStateResponse)
def new_game(
    session: GameSession = Depends(get_game_session),
) -> GameStateResponse:
    """
    새 게임

    진행 상태와 퀘스트 원장을 초기화하고 저장 슬롯을 지웁니다.
    """
    session.new_game()
    return _build_state_response(session)


@router.get("/locations", response_model=list[LocationResponse])
def get_locations(
    session: GameSession = Depends(get_game_session),
) -> list[LocationResponse]:
    """해금된 장소 목록 (대기 이벤트 표시 포함)"""
    return [
        LocationResponse(
            id=info.id,
            name=info.name,
            icon=info.icon,
            description=info.description,
            unlocked=info.unlocked,
            has_event=info.has_event,
            required_day=info.required_day,
        )
        for info in session.progress.get_available_locations()
    ]


@router.post(
    "/locations/{location_id}/visit",
    response_model=VisitResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def visit_location(
    location_id: str,
    session: GameSession = Depends(get_game_session),
) -> VisitResponse:
    """
    장소 방문

    퀘스트 진행 판정 → 시간 1칸 진행 → 장소에 맞는 챕터를 시작합니다.
    """
    if not session.is_known_location(location_id):
        raise HTTPException(status_code=404, detail=f"Location not found: {location_id}")
    if not session.is_location_unlocked(location_id):
        raise HTTPException(status_code=409, detail=f"Location locked: {location_id}")

    chapter = session.visit_location(location_id)
    if chapter is None:
        logger.error("Location %s routed to a missing chapter", location_id)
        raise HTTPException(
            status_code=404, detail=f"Chapter not found for location: {location_id}"
        )

    return VisitResponse(
        location_id=location_id,
        dialogue=_build_dialogue_response(session),
    )


@router.post("/rest", response_model=GameStateResponse)
def rest(
    session: GameSession = Depends(get_game_session),
) -> GameStateResponse:
    """휴식: 시간 1칸 진행 + 허기 회복"""
    session.rest()
    return _build_state_response(session)


@router.get("/quest", response_model=QuestResponse)
def get_quest(
    session: GameSession = Depends(get_game_session),
) -> QuestResponse:
    """퀘스트 원장 조회"""
    quests = session.quests
    active = quests.get_active_quest()
    completed_count, total_count = quests.get_quest_progress()
    return QuestResponse(
        active=(
            QuestInfo(
                id=active.id,
                title=active.title,
                description=active.description,
                quest_type=active.quest_type,
                target_location=active.target_location,
                is_complete=active.is_complete,
            )
            if active
            else None
        ),
        display_text=quests.get_quest_display_text(),
        completed=quests.get_completed_quests(),
        completed_count=completed_count,
        total_count=total_count,
    )


# === /dialogue ===


@dialogue_router.post(
    "/start",
    response_model=DialogueResponse,
    responses={404: {"model": ErrorResponse}},
)
def start_chapter(
    request: StartChapterRequest,
    session: GameSession = Depends(get_game_session),
) -> DialogueResponse:
    """챕터 로드 + 첫 노드"""
    chapter = session.start_chapter(request.chapter_id)
    if chapter is None:
        raise HTTPException(
            status_code=404, detail=f"Chapter not found: {request.chapter_id}"
        )
    return _build_dialogue_response(session)


@dialogue_router.get(
    "/current",
    response_model=DialogueResponse,
    responses={409: {"model": ErrorResponse}},
)
def get_current(
    session: GameSession = Depends(get_game_session),
) -> DialogueResponse:
    _require_chapter(session)
    return _build_dialogue_response(session)


@dialogue_router.post(
    "/advance",
    response_model=DialogueResponse,
    responses={409: {"model": ErrorResponse}},
)
def advance(
    session: GameSession = Depends(get_game_session),
) -> DialogueResponse:
    """
    선형 진행

    선택지 노드에서는 아무 일도 일어나지 않습니다 (현재 노드 그대로).
    """
    _require_chapter(session)
    session.advance()
    return _build_dialogue_response(session)


@dialogue_router.post(
    "/choose",
    response_model=DialogueResponse,
    responses={409: {"model": ErrorResponse}},
)
def choose(
    request: ChooseRequest,
    session: GameSession = Depends(get_game_session),
) -> DialogueResponse:
    """선택지 선택. 범위 밖 인덱스는 무시 (현재 노드 유지)."""
    _require_chapter(session)
    session.choose(request.index)
    return _build_dialogue_response(session)


@dialogue_router.post(
    "/finish",
    response_model=FinishResponse,
    responses={409: {"model": ErrorResponse}},
)
def finish_chapter(
    session: GameSession = Depends(get_game_session),
) -> FinishResponse:
    """
    챕터 종료 처리

    대화가 아직 끝나지 않았거나 이미 종료 처리된 챕터면 outcome은 null입니다.
    """
    _require_chapter(session)
    outcome = session.finish_chapter()
    return FinishResponse(
        outcome=_build_outcome_info(outcome) if outcome else None,
        triggers=_triggers(session),
    )


# === /battle ===


@battle_router.post(
    "/result",
    response_model=FinishResponse,
    responses={409: {"model": ErrorResponse}},
)
def report_battle_result(
    request: BattleResultRequest,
    session: GameSession = Depends(get_game_session),
) -> FinishResponse:
    """보류 중인 전투 결과 보고"""
    if session.pending_battle is None:
        raise HTTPException(status_code=409, detail="No pending battle")
    outcome = session.report_battle(request.victory, request.captured)
    return FinishResponse(
        outcome=_build_outcome_info(outcome) if outcome else None,
        triggers=_triggers(session),
    )
