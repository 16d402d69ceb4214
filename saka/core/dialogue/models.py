"""대화 그래프 도메인 모델 (DB 무관)

챕터 JSON 포맷:
    {"id", "title", "titleMalay", "startNode", "lines": {node_id: {...}}}

로드 시점에는 그래프를 검증하지 않는다. 누락 필드는 관대하게 기본값 처리하고,
무결성은 validation 모듈이 오프라인으로 보장한다. 단, lines/choices의
컨테이너 타입이 틀리면 ValueError (파일 단위로 건너뛰도록).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DialogueChoice:
    """선택지 1개"""

    text: str
    next: str  # 이동할 노드 ID
    flag: Optional[str] = None  # 선택 시 True로 기록할 세션 플래그

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DialogueChoice:
        return cls(
            text=str(raw.get("text", "")),
            next=str(raw.get("next", "")),
            flag=raw.get("flag") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"text": self.text, "next": self.next}
        if self.flag:
            data["flag"] = self.flag
        return data


@dataclass
class DialogueLine:
    """대화 노드 1개. id는 lines 맵의 키."""

    id: str
    text: str = ""
    speaker: Optional[str] = None
    expression: Optional[str] = None
    next: Optional[str] = None
    choices: list[DialogueChoice] = field(default_factory=list)

    # 부수효과 태그 (렌더러에 불투명 문자열로 전달)
    effect: Optional[str] = None  # "shake"|"flash"|"fadeout"
    background: Optional[str] = None
    enemy: Optional[str] = None  # 적 연출용 spirit id
    battle: Optional[str] = None  # 종료 노드에서 전투를 여는 spirit id

    @property
    def has_choices(self) -> bool:
        return len(self.choices) > 0

    @property
    def is_terminal(self) -> bool:
        """next도 선택지도 없으면 종료 노드 (battle 태그 여부 무관)"""
        return not self.next and not self.choices

    @classmethod
    def from_dict(cls, node_id: str, raw: dict[str, Any]) -> DialogueLine:
        raw_choices = raw.get("choices") or []
        if not isinstance(raw_choices, list):
            raise ValueError(f"node {node_id}: choices must be a list")
        return cls(
            id=node_id,
            text=str(raw.get("text", "")),
            speaker=raw.get("speaker") or None,
            expression=raw.get("expression") or None,
            next=raw.get("next") or None,
            choices=[
                DialogueChoice.from_dict(c) for c in raw_choices if isinstance(c, dict)
            ],
            effect=raw.get("effect") or None,
            background=raw.get("background") or None,
            enemy=raw.get("enemy") or None,
            battle=raw.get("battle") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "text": self.text}
        for key in ("speaker", "expression", "next", "effect", "background", "enemy", "battle"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.choices:
            data["choices"] = [c.to_dict() for c in self.choices]
        return data


@dataclass
class Chapter:
    """챕터 = 하나의 분기 대화 그래프"""

    id: str
    title: str
    title_malay: str
    start_node: str
    lines: dict[str, DialogueLine] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Chapter:
        raw_lines = raw.get("lines") or {}
        if not isinstance(raw_lines, dict):
            raise ValueError(f"chapter {raw.get('id', '?')}: lines must be an object")
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title", "")),
            title_malay=str(raw.get("titleMalay", "")),
            start_node=str(raw.get("startNode", "")),
            lines={
                node_id: DialogueLine.from_dict(node_id, node)
                for node_id, node in raw_lines.items()
                if isinstance(node, dict)
            },
        )

    def to_dict(self) -> dict[str, Any]:
        lines = {}
        for node_id, line in self.lines.items():
            node = line.to_dict()
            node.pop("id")
            lines[node_id] = node
        return {
            "id": self.id,
            "title": self.title,
            "titleMalay": self.title_malay,
            "startNode": self.start_node,
            "lines": lines,
        }

    def get_line(self, node_id: Optional[str]) -> Optional[DialogueLine]:
        """노드 조회. 없는 ID면 None (예외 없음)."""
        if node_id is None:
            return None
        return self.lines.get(node_id)
