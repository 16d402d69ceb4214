"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


# === Request Schemas ===


class StartChapterRequest(BaseModel):
    """챕터 시작 요청"""

    chapter_id: str = Field(..., min_length=1, description="챕터 ID")


class ChooseRequest(BaseModel):
    """선택지 선택 요청"""

    index: int = Field(..., description="선택지 인덱스 (0부터)")


class BattleResultRequest(BaseModel):
    """전투 결과 보고"""

    victory: bool
    captured: bool = False


# === Response Schemas ===


class TriggerInfo(BaseModel):
    """호스트 트리거 (렌더러가 해석)"""

    type: str
    data: dict[str, Any] = {}


class ChoiceInfo(BaseModel):
    index: int
    text: str


class LineInfo(BaseModel):
    """현재 대화 노드"""

    id: str
    text: str
    speaker: Optional[str] = None
    expression: Optional[str] = None
    effect: Optional[str] = None
    background: Optional[str] = None
    enemy: Optional[str] = None
    battle: Optional[str] = None
    choices: list[ChoiceInfo] = []


class OutcomeInfo(BaseModel):
    """챕터/전투 종료 후 흐름"""

    kind: str  # load_chapter | start_battle | return_to_hub
    chapter_id: Optional[str] = None
    enemy_id: Optional[str] = None
    source_chapter: Optional[str] = None
    return_chapter: Optional[str] = None


class DialogueResponse(BaseModel):
    """대화 진행 응답"""

    chapter_id: Optional[str] = None
    title: str = ""
    title_malay: str = ""
    line: Optional[LineInfo] = None
    is_end: bool
    has_choices: bool = False
    triggers: list[TriggerInfo] = []


class FinishResponse(BaseModel):
    """챕터 종료 / 전투 결과 응답"""

    outcome: Optional[OutcomeInfo] = None
    triggers: list[TriggerInfo] = []


class GameStateResponse(BaseModel):
    """진행 상태 응답"""

    day: int
    time_slot: str
    time_display: str
    hunger: int
    captured_spirits: list[str] = []
    unlocked_locations: list[str] = []
    completed_events: list[str] = []
    social_bonds: dict[str, int] = {}
    current_chapter: str
    tutorial_completed: bool
    should_go_to_hub: bool
    triggers: list[TriggerInfo] = []


class LocationResponse(BaseModel):
    """장소 정보"""

    id: str
    name: str
    icon: str
    description: str
    unlocked: bool
    has_event: bool = False
    required_day: Optional[int] = None


class QuestInfo(BaseModel):
    id: str
    title: str
    description: str
    quest_type: str
    target_location: Optional[str] = None
    is_complete: bool = False


class QuestResponse(BaseModel):
    """퀘스트 원장 응답"""

    active: Optional[QuestInfo] = None
    display_text: str = ""
    completed: list[str] = []
    completed_count: int
    total_count: int


class VisitResponse(BaseModel):
    """장소 방문 응답 (방문한 장소의 챕터가 바로 시작됨)"""

    location_id: str
    dialogue: DialogueResponse


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
