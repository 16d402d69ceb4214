"""초상화가 매핑된 화자 + 표정 목록"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CharacterPortrait:
    name: str
    side: str  # "left"|"right"
    expressions: tuple[str, ...]

    def has_expression(self, expression: str) -> bool:
        return expression in self.expressions


KNOWN_CHARACTERS: dict[str, CharacterPortrait] = {
    "Syafiq": CharacterPortrait(
        name="Syafiq",
        side="left",
        expressions=("neutral", "shocked", "angry", "sad", "smirk"),
    ),
    "Dian": CharacterPortrait(
        name="Dian",
        side="right",
        expressions=("neutral", "worried", "happy", "angry", "frightened"),
    ),
    "Zafri": CharacterPortrait(
        name="Zafri",
        side="right",
        expressions=("neutral", "excited", "nervous", "serious", "frustrated"),
    ),
    "Mak": CharacterPortrait(
        name="Mak",
        side="right",
        expressions=("neutral", "loving", "worried", "stern"),
    ),
    "Ikal": CharacterPortrait(
        name="Ikal",
        side="right",
        expressions=("neutral", "guarded", "knowing", "warning"),
    ),
}
