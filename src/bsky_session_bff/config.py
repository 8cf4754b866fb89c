# src/bsky_session_bff/config.py

import re
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env is at the project root, two levels up from src/bsky_session_bff/
CONFIG_FILE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT_DIR = CONFIG_FILE_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT_DIR / ".env"

if ENV_FILE_PATH.exists():
    load_dotenv(dotenv_path=ENV_FILE_PATH, override=True)
    print(f"BskySessionBFF: Successfully loaded .env file from: {ENV_FILE_PATH}")
else:
    print(
        f"BskySessionBFF: Warning: .env file not found at {ENV_FILE_PATH}. Relying on environment variables."
    )

# Bluesky app passwords look like "abcd-efgh-ijkl-mnop"
APP_PASSWORD_PATTERN = re.compile(r"^[a-z0-9]{4}-[a-z0-9]{4}-[a-z0-9]{4}-[a-z0-9]{4}$")

# The listener is not configurable.
SERVER_HOST = "0.0.0.0"
SERVER_PORT = 3000


class ConfigurationError(Exception):
    """Raised when IDENTIFIER / PASSWORD are missing or unusable."""


def is_valid_app_password(app_password: Optional[str]) -> bool:
    return bool(app_password) and APP_PASSWORD_PATTERN.fullmatch(app_password) is not None


class Settings(BaseSettings):
    # === Bluesky account ===
    IDENTIFIER: str
    PASSWORD: str

    # === AT Protocol service (PDS / entryway) ===
    SERVICE_URL: str = "https://bsky.social"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False
    )

    @field_validator("IDENTIFIER", mode='before')
    @classmethod
    def require_identifier(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise ValueError("IDENTIFIER must be set")
        return str(v).strip()

    @field_validator("PASSWORD", mode='before')
    @classmethod
    def require_app_password(cls, v: Any) -> str:
        if v is None or not str(v):
            raise ValueError("PASSWORD must be set")
        if not is_valid_app_password(str(v)):
            # Never echo the value back, it is a credential.
            raise ValueError("PASSWORD must contain a Bluesky app password")
        return str(v)


def load_settings(**overrides: Any) -> Settings:
    """
    Reads and validates the configuration.
    Raises ConfigurationError instead of exiting, the entry point in main.py
    decides whether the process terminates.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        missing = [
            str(err["loc"][0]) for err in e.errors()
            if err["type"] == "missing" and err.get("loc")
        ]
        if missing:
            raise ConfigurationError(
                "Environment variables IDENTIFIER and PASSWORD must be set"
            ) from e
        messages = "; ".join(str(err["msg"]) for err in e.errors())
        raise ConfigurationError(f"Invalid configuration: {messages}") from e

    print(f"BskySessionBFF: Configuration loaded for identifier: {settings.IDENTIFIER}")
    print(f"BskySessionBFF: AT Protocol service: {settings.SERVICE_URL}")
    return settings
