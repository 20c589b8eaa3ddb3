"""
Application configuration management with environment-based settings.
"""
from typing import List, Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ============= Application Settings =============
    APP_NAME: str = "AI Quiz Generator"
    APP_VERSION: str = "2.0.0"
    APP_DESCRIPTION: str = "Quiz and personality assessment API backed by small local language models"
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    API_PREFIX: str = "/api"
    DOCS_URL: Optional[str] = "/docs"

    # ============= Server Settings =============
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    WORKERS: int = Field(default=1)
    RELOAD: bool = Field(default=False)

    # CORS Settings
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # ============= Model Settings =============
    # Hub ids or local directories, one per slot
    QUIZ_MODEL_PATH: str = "distilgpt2"
    PSYCHOLOGY_MODEL_PATH: str = "distilgpt2"
    ANALYSIS_MODEL_PATH: str = "distilgpt2"

    MODEL_CONTEXT_SIZE: int = 1024
    MODEL_MAX_TOKENS: int = 128
    MODEL_TEMPERATURE: float = 0.7

    ENABLE_GPU: bool = False
    CUDA_DEVICE: int = 0

    # ============= Monitoring Settings =============
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    PROMETHEUS_ENABLED: bool = True

    # ============= Logging Settings =============
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def model_paths(self) -> dict:
        """Configured model path per slot name."""
        return {
            "quiz": self.QUIZ_MODEL_PATH,
            "psychology": self.PSYCHOLOGY_MODEL_PATH,
            "analysis": self.ANALYSIS_MODEL_PATH,
        }

    def device(self) -> str:
        """Torch device string for model placement."""
        if self.ENABLE_GPU:
            return f"cuda:{self.CUDA_DEVICE}"
        return "cpu"

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export settings instance
settings = get_settings()
