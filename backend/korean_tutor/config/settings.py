"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Korean Tutor Chat"
    app_version: str = "1.0.0"
    debug: bool = True

    # Upstream completion API (Groq, OpenAI-compatible)
    llm_provider: str = "groq"
    groq_api_key: Optional[str] = None  # server-side secret, never sent to clients
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    llm_timeout: float = 60.0

    # Chat limits
    max_message_length: int = 1000

    # Session persistence
    local_storage_path: str = "./data"
    chat_storage_key: str = "koreanChatHistory"

    # Relay client (used by the headless chat view)
    relay_base_url: str = "http://127.0.0.1:8000"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/korean_tutor.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
