"""퀘스트 관련 열거형"""

from enum import Enum


class QuestType(str, Enum):
    MAIN = "main"
    SIDE = "side"
    HUNT = "hunt"
