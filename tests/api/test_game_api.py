"""게임 API 통합 테스트

TestClient + in-memory SQLite + 번들 챕터.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from saka.api.game import battle_router, dialogue_router
from saka.api.game import router as game_router
from saka.db.database import init_db, make_engine
from saka.engine.game_session import GameSession


@pytest.fixture()
def client(bundled_registry, spirit_catalog):
    """TestClient + 인메모리 환경 세팅"""
    db_engine = make_engine("sqlite:///:memory:")
    init_db(db_engine)
    db = sessionmaker(bind=db_engine)()

    app = FastAPI()
    app.include_router(game_router)
    app.include_router(dialogue_router)
    app.include_router(battle_router)
    app.state.game_session = GameSession(db, bundled_registry, spirit_catalog)

    with TestClient(app) as tc:
        yield tc

    db.close()


def _play_to_end(client: TestClient) -> dict:
    data = client.get("/dialogue/current").json()
    for _ in range(200):
        if data["is_end"]:
            break
        if data["has_choices"]:
            data = client.post("/dialogue/choose", json={"index": 0}).json()
        else:
            data = client.post("/dialogue/advance").json()
    return data


class TestGameState:
    def test_initial_state(self, client):
        response = client.get("/game/state")
        assert response.status_code == 200
        data = response.json()
        assert data["day"] == 1
        assert data["time_slot"] == "malam"
        assert data["hunger"] == 70
        assert data["time_display"] == "Hari 1 — Malam 🌙"
        assert data["should_go_to_hub"] is False

    def test_locations(self, client):
        data = client.get("/game/locations").json()
        assert [loc["id"] for loc in data] == ["unit-9-4", "rumah-syafiq"]
        assert data[0]["has_event"] is True

    def test_rest(self, client):
        data = client.post("/game/rest").json()
        assert data["day"] == 2
        assert data["time_slot"] == "pagi"
        assert data["hunger"] == 95

    def test_quest(self, client):
        data = client.get("/game/quest").json()
        assert data["active"]["id"] == "meet-dian"
        assert data["completed"] == ["discover-unit94"]
        assert data["completed_count"] == 1
        assert data["total_count"] == 7

    def test_new_game(self, client):
        client.post("/game/rest")
        data = client.post("/game/new").json()
        assert data["day"] == 1


class TestVisit:
    def test_visit_starts_chapter(self, client):
        response = client.post("/game/locations/rumah-syafiq/visit")
        assert response.status_code == 200
        data = response.json()
        assert data["dialogue"]["chapter_id"] == "home-visit"
        assert data["dialogue"]["line"]["id"] == "start"
        assert data["dialogue"]["triggers"][0]["type"] == "background_changed"

    def test_unknown_location_404(self, client):
        assert client.post("/game/locations/pasar/visit").status_code == 404

    def test_locked_location_409(self, client):
        assert client.post("/game/locations/rooftop/visit").status_code == 409


class TestDialogue:
    def test_start_unknown_chapter_404(self, client):
        response = client.post("/dialogue/start", json={"chapter_id": "ghost"})
        assert response.status_code == 404

    def test_no_chapter_409(self, client):
        assert client.get("/dialogue/current").status_code == 409
        assert client.post("/dialogue/advance").status_code == 409
        assert client.post("/dialogue/finish").status_code == 409

    def test_bad_body_422(self, client):
        client.post("/dialogue/start", json={"chapter_id": "chapter1"})
        assert client.post("/dialogue/choose", json={"index": "satu"}).status_code == 422

    def test_start_advance_choose_finish(self, client):
        data = client.post("/dialogue/start", json={"chapter_id": "chapter1"}).json()
        assert data["chapter_id"] == "chapter1"
        assert data["title_malay"] == "Bab 1: Bilik Dimeterai"
        assert data["line"]["id"] == "start"

        data = client.post("/dialogue/advance").json()
        assert data["line"]["speaker"] == "Syafiq"

        client.post("/dialogue/advance")
        data = client.post("/dialogue/advance").json()
        assert data["has_choices"] is True
        assert [c["index"] for c in data["line"]["choices"]] == [0, 1]

        # 선택지 노드에서 advance는 그대로
        assert client.post("/dialogue/advance").json()["line"]["id"] == "choice"
        # 범위 밖 선택 무시
        assert client.post("/dialogue/choose", json={"index": 5}).json()["line"]["id"] == "choice"

        early = client.post("/dialogue/finish").json()
        assert early["outcome"] is None

        data = _play_to_end(client)
        assert data["is_end"] is True

        finish = client.post("/dialogue/finish").json()
        assert finish["outcome"] == {
            "kind": "load_chapter",
            "chapter_id": "tutorial-wake",
            "enemy_id": None,
            "source_chapter": None,
            "return_chapter": None,
        }


class TestBattle:
    def test_no_pending_battle_409(self, client):
        response = client.post("/battle/result", json={"victory": True})
        assert response.status_code == 409

    def test_battle_round_trip(self, client):
        client.post("/dialogue/start", json={"chapter_id": "tutorial-dian"})
        _play_to_end(client)
        finish = client.post("/dialogue/finish").json()
        assert finish["outcome"]["kind"] == "start_battle"
        assert finish["outcome"]["enemy_id"] == "toyol"
        assert finish["triggers"][-1]["type"] == "battle_requested"

        result = client.post("/battle/result", json={"victory": True, "captured": True})
        assert result.status_code == 200
        assert result.json()["outcome"]["chapter_id"] == "tutorial-capture"

        state = client.get("/game/state").json()
        assert state["captured_spirits"] == ["toyol"]
        assert state["hunger"] == 100

    def test_retried_finish_and_result(self, client):
        client.post("/dialogue/start", json={"chapter_id": "tutorial-dian"})
        _play_to_end(client)
        client.post("/dialogue/finish")
        assert client.post("/battle/result", json={"victory": True}).status_code == 200

        retry = client.post("/dialogue/finish")
        assert retry.status_code == 200
        assert retry.json()["outcome"] is None
        assert client.post("/battle/result", json={"victory": True}).status_code == 409

        state = client.get("/game/state").json()
        assert state["social_bonds"]["dian"] == 10
