"""Application configuration using Pydantic BaseSettings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at import time and frozen afterwards; request handling only
    ever reads from it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # --- Application ---
    PROJECT_NAME: str = "Ollama Structured Gateway"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 3000
    SERVICE_NAME: str = "ollama-middleware"

    # --- Completion service (Ollama) ---
    OLLAMA_API: str = "http://localhost:11434"
    DEFAULT_MODEL: str = "gemma:2b"
    # Model used for the JSON regeneration pass; empty means DEFAULT_MODEL.
    TRANSFORM_MODEL: str = ""
    # None disables the client-side timeout entirely.
    OLLAMA_TIMEOUT_SECONDS: float | None = None

    # --- CORS ---
    CORS_ORIGINS: str = "*"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def transform_model(self) -> str:
        return self.TRANSFORM_MODEL or self.DEFAULT_MODEL


settings = Settings()
