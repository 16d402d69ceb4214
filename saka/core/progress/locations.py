"""장소표 + 장소별 이벤트 판정"""

from __future__ import annotations

from .models import GameState, LocationDef, LocationInfo, TimeSlot

LOCATIONS: list[LocationDef] = [
    LocationDef(
        id="unit-9-4",
        name="🏚️ Unit 9-4",
        icon="🏚️",
        description="Bilik dimeterai. Tempat segalanya bermula.",
        always_unlocked=True,
    ),
    LocationDef(
        id="tangga",
        name="🪜 Tangga Tingkat 9",
        icon="🪜",
        description="Tempat Dian selalu lalu. Mungkin dia ada kat sini.",
        required_day=2,
    ),
    LocationDef(
        id="rumah-syafiq",
        name="🏠 Rumah Syafiq",
        icon="🏠",
        description="Tempat berehat. Boleh cakap dengan mak.",
        always_unlocked=True,
    ),
    LocationDef(
        id="rooftop",
        name="🔝 Rooftop",
        icon="🔝",
        description="Kawasan penunggu. Bahaya, tapi boleh latihan.",
        required_day=3,
    ),
    LocationDef(
        id="kedai-runcit",
        name="🏪 Kedai Runcit",
        icon="🏪",
        description="Tempat orang PPR berkumpul. Dengar cerita, dapat info.",
        required_day=2,
    ),
]

LOCATION_IDS = [loc.id for loc in LOCATIONS]


def has_event_available(location_id: str, state: GameState) -> bool:
    """장소별 대기 이벤트 여부. 장소마다 규칙이 다르다."""
    events = state.completed_events

    if location_id == "unit-9-4":
        if state.day == 1 and state.time_slot == TimeSlot.MALAM:
            return "chapter1-complete" not in events
        return False

    if location_id == "tangga":
        return state.day >= 2 and "met-dian" not in events

    if location_id == "rumah-syafiq":
        return state.day >= 2 and "talked-to-mum" not in events

    return False


def build_location_info(location: LocationDef, state: GameState) -> LocationInfo:
    unlocked = location.always_unlocked or location.id in state.unlocked_locations
    return LocationInfo(
        id=location.id,
        name=location.name,
        icon=location.icon,
        description=location.description,
        unlocked=unlocked,
        has_event=has_event_available(location.id, state),
        required_day=location.required_day,
    )


def available_locations(state: GameState) -> list[LocationInfo]:
    """해금된 장소만, 장소표 순서대로."""
    infos = [build_location_info(loc, state) for loc in LOCATIONS]
    return [info for info in infos if info.unlocked]
