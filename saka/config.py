"""Application configuration loaded from environment variables and .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./saka.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 콘텐츠 경로 (검증 CLI + 호스트 공용)
    CHAPTERS_DIR: str = str(DATA_DIR / "chapters")
    SPIRITS_FILE: str = str(DATA_DIR / "spirits.json")


settings = Settings()
