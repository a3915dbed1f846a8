"""Application settings loaded from environment variables."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Chatpilot configuration. All values come from environment variables."""

    # Anthropic
    anthropic_api_key: str = Field(default="")
    chat_model: str = Field(default="claude-sonnet-4-5-20250929")
    max_tokens: int = Field(default=4096)

    # Hugging Face Inference API
    hf_api_key: str = Field(default="")
    hf_inference_url: str = Field(default="https://router.huggingface.co/hf-inference/models")
    hf_timeout_seconds: float = Field(default=120.0)
    embedding_model: str = Field(default="sentence-transformers/all-MiniLM-L6-v2")
    embedding_dimension: int = Field(default=384)
    image_model: str = Field(default="stabilityai/stable-diffusion-xl-base-1.0")
    image_steps: int = Field(default=30)
    image_guidance_scale: float = Field(default=7.5)

    # Database
    database_path: Path = Field(default=Path("data/chatpilot.db"))

    # Conversation memory
    memory_limit: int = Field(default=100)
    memory_context_size: int = Field(default=3)

    # Reminders
    reminder_poll_seconds: int = Field(default=30)
    timezone: str = Field(default="UTC")
    console_notifications: bool = Field(default=True)

    # Web
    web_host: str = Field(default="127.0.0.1")
    web_port: int = Field(default=8080)
    max_upload_size: int = Field(default=20 * 1024 * 1024)

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_timezone(self) -> ZoneInfo:
        """Resolve TIMEZONE into a ZoneInfo."""
        return ZoneInfo(self.timezone)


settings = Settings()
