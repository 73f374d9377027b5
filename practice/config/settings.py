from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Interview Practice"
    APP_ADDRESS: str = "0.0.0.0"
    APP_PORT: int = 8000

    CAREER_API_URL: str = "http://localhost:5000"
    CAREER_API_TOKEN: str | None = None
    REQUEST_TIMEOUT: float = 30.0

    ANALYZER_BACKEND: str = "remote"
    MISTRAL_API_KEY: str | None = None
    MISTRAL_MODEL: str = "mistral-large-latest"

    QUESTION_TIME_LIMIT: int = 120

    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
