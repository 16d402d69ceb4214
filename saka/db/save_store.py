"""저장 슬롯 저장소 — 키-값 JSON 영속화

저장은 최선 노력(best-effort)이다. DB 오류는 롤백 + 경고 로그 후 False를 반환하고,
호출자의 메모리 상태가 계속 기준이 된다.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from saka.db.models import SaveSlotModel

logger = logging.getLogger(__name__)


class SaveStore:
    """save_slots 테이블 래퍼"""

    def __init__(self, db: Session):
        self._db = db

    def load(self, key: str) -> Optional[str]:
        """저장된 JSON 텍스트. 없거나 읽기 실패 시 None."""
        try:
            row = self._db.get(SaveSlotModel, key)
        except SQLAlchemyError:
            self._db.rollback()
            logger.warning("Failed to read save slot %s", key, exc_info=True)
            return None
        if row is None:
            return None
        return row.payload

    def save(self, key: str, payload: dict[str, Any]) -> bool:
        """payload 전체를 덮어쓴다."""
        text = json.dumps(payload, ensure_ascii=False)
        now = datetime.now(timezone.utc)
        try:
            row = self._db.get(SaveSlotModel, key)
            if row is None:
                self._db.add(SaveSlotModel(slot_key=key, payload=text, updated_at=now))
            else:
                row.payload = text
                row.updated_at = now
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            logger.warning("Failed to write save slot %s", key, exc_info=True)
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            row = self._db.get(SaveSlotModel, key)
            if row is None:
                return False
            self._db.delete(row)
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            logger.warning("Failed to delete save slot %s", key, exc_info=True)
            return False
        return True

    def exists(self, key: str) -> bool:
        return self.load(key) is not None
