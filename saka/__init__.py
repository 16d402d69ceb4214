"""SAKA 대화·진행 엔진"""

__version__ = "0.1.0"
