"""Configuration management using Pydantic Settings"""

from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Record source: "supabase" queries the remote store, "mock" generates synthetic loans
    data_source: Literal["supabase", "mock"] = "supabase"

    # Remote store (PostgREST endpoint)
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    loans_table: str = "loans"
    page_size: int = 1000

    # Mock source
    mock_record_count: int = 500
    mock_seed: int | None = None

    # Thresholds
    default_threshold: float = 0.7
    refusal_threshold: float = 0.6
    sweep_step: float = 0.05
    threshold_write_key: str = ""  # Empty disables threshold writes

    # Database
    database_url: str = "sqlite:///./westgate.db"

    # Service
    service_name: str = "westgate-analytics"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0


settings = Settings()
