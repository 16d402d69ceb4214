"""Spirit 카탈로그 — spirits.json 로드"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .models import SpiritRecord, SpiritStats

logger = logging.getLogger(__name__)


class SpiritCatalog:
    """
    Spirit 저장소.
    battle 태그 검증 + 전투 셋업(범위 밖)에서 조회.
    """

    def __init__(self) -> None:
        self._spirits: dict[str, SpiritRecord] = {}

    def load_from_json(self, path: str | Path) -> int:
        """spirits.json 로드. 반환: 로드된 수량.

        배열 형식과 {id: record} 객체 형식 모두 허용.
        개별 레코드 오류는 경고 후 건너뛴다. 파일 자체를 못 읽으면 예외 전파.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)

        if isinstance(raw, dict):
            raw_list = []
            for key, record in raw.items():
                if not isinstance(record, dict):
                    logger.warning("Failed to load spirit %s: record is not an object", key)
                    continue
                raw_list.append(dict(record, id=record.get("id", key)))
        else:
            raw_list = list(raw)

        count = 0
        for record in raw_list:
            try:
                stats = record.get("baseStats", {})
                spirit = SpiritRecord(
                    id=record["id"],
                    name=record["name"],
                    spirit_type=record.get("type", "unknown"),
                    tier=int(record.get("tier", 1)),
                    base_stats=SpiritStats(
                        hp=int(stats["hp"]),
                        power=int(stats["power"]),
                        defense=int(stats["defense"]),
                        speed=int(stats["speed"]),
                        willpower=int(stats.get("willpower", 0)),
                    ),
                    bottle_type=record.get("bottleType", "botol-kaca"),
                    special_ability=record.get("specialAbility", ""),
                    tags=tuple(record.get("tags", [])),
                )
                self._spirits[spirit.id] = spirit
                count += 1
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "Failed to load spirit %s: %s",
                    record.get("id", "?") if isinstance(record, dict) else "?",
                    e,
                )

        logger.info("Loaded %d spirits from %s", count, path)
        return count

    def register(self, spirit: SpiritRecord) -> None:
        if spirit.id in self._spirits:
            logger.warning("Overwriting existing spirit: %s", spirit.id)
        self._spirits[spirit.id] = spirit

    def get(self, spirit_id: str) -> Optional[SpiritRecord]:
        return self._spirits.get(spirit_id)

    def ids(self) -> list[str]:
        return list(self._spirits)

    def count(self) -> int:
        return len(self._spirits)
