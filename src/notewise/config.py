"""Configuration management for NoteWise."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini
    google_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    generation_temperature: float = 0.3
    max_output_tokens: int = 8192

    # Processing
    generation_timeout_seconds: float = 60.0
    parallel_generators: bool = False

    # Session persistence
    session_db_url: str = "sqlite:///.notewise_session.db"
    highlights_key: str = "noteWiseCurrentHighlights"
    annotations_key: str = "noteWiseAnnotations"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
