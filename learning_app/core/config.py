from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./learning_app.db"

    # Anthropic (primary LLM provider)
    ANTHROPIC_API_KEY: str | None = None

    # OpenAI (fallback LLM provider)
    OPENAI_API_KEY: str | None = None

    # TranscriptAPI.com (primary transcript provider)
    TRANSCRIPT_API_KEY: str | None = None

    # Supadata.ai (fallback transcript provider)
    SUPADATA_API_KEY: str | None = None

    # App
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_URL: str = "http://localhost:8000"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "Learning App"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
