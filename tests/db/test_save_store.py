"""SaveStore 테스트 — 저장 슬롯 CRUD + DB 오류 시 최선 노력 동작"""

import json
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from saka.db.save_store import SaveStore


class TestSaveStore:
    def test_missing_key(self, db_session):
        store = SaveStore(db_session)
        assert store.load("nope") is None
        assert store.exists("nope") is False

    def test_save_and_load(self, db_session):
        store = SaveStore(db_session)
        assert store.save("slot", {"day": 2, "nama": "Syafiq"}) is True
        assert json.loads(store.load("slot")) == {"day": 2, "nama": "Syafiq"}
        assert store.exists("slot") is True

    def test_overwrite(self, db_session):
        store = SaveStore(db_session)
        store.save("slot", {"v": 1})
        store.save("slot", {"v": 2})
        assert json.loads(store.load("slot")) == {"v": 2}

    def test_delete(self, db_session):
        store = SaveStore(db_session)
        store.save("slot", {"v": 1})
        assert store.delete("slot") is True
        assert store.load("slot") is None
        assert store.delete("slot") is False

    def test_commit_failure_returns_false(self, db_session):
        store = SaveStore(db_session)
        error = OperationalError("COMMIT", {}, Exception("disk I/O error"))
        with patch.object(db_session, "commit", side_effect=error):
            assert store.save("slot", {"v": 1}) is False
        assert store.load("slot") is None
