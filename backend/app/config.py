"""
Application settings loaded from environment variables and .env
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the interview generator service"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Resume Interview Generator"
    VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Upload intake
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 5 * 1024 * 1024
    ALLOWED_FILE_TYPE: str = "application/pdf"

    # LLM provider (OpenAI-compatible chat completions)
    GROQ_API_KEY: Optional[str] = None
    MODEL: Optional[str] = None
    LLM_API_BASE: str = "https://api.groq.com/openai/v1"
    LLM_TIMEOUT: Optional[float] = None
    LLM_TEMPERATURE: Optional[float] = None
    INTERVIEW_QUESTION_COUNT: int = Field(default=5, ge=1, le=20)

    CORS_ORIGINS: List[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
