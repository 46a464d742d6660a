# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
import logging
from dataclasses import dataclass
from typing import Optional

from cryptography.fernet import Fernet
from limits import parse_many

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_TAVUS_URL = "https://tavusapi.com/v2"
DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class ConfigurationError(RuntimeError):
    """Raised when the process environment cannot produce a usable configuration."""


def _is_placeholder(value: Optional[str]) -> bool:
    return bool(value) and ("your-" in value or "your_" in value)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _get_bool(name: str) -> bool:
    return os.getenv(name, "false").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    database_url: str
    fernet_secret: str
    env: str = "development"

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_api_url: str = DEFAULT_OPENAI_URL
    oracle_timeout_seconds: float = 20.0
    oracle_max_retries: int = 2

    tavus_api_key: Optional[str] = None
    tavus_api_url: str = DEFAULT_TAVUS_URL
    tavus_webhook_url: Optional[str] = None

    openweather_api_key: Optional[str] = None
    openweather_api_url: str = DEFAULT_WEATHER_URL
    external_context_enabled: bool = False

    nudge_scheduler_enabled: bool = False
    nudge_cron_hours: str = "*/6"
    scheduler_timezone: str = "UTC"

    chat_rate_limit: str = "30/minute"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Reads the process environment (and a local .env outside production)
        and returns validated settings. Any problem is fatal.
        """
        # ✅ Only load .env in local/dev
        if os.environ.get("ENV") != "production":
            from dotenv import load_dotenv
            load_dotenv()

        settings = cls(
            database_url=os.getenv("DATABASE_URL", ""),
            fernet_secret=os.getenv("FERNET_SECRET", ""),
            env=os.getenv("ENV", "development"),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_api_url=os.getenv("OPENAI_API_URL", DEFAULT_OPENAI_URL),
            oracle_timeout_seconds=_get_float("ORACLE_TIMEOUT_SECONDS", 20.0),
            oracle_max_retries=_get_int("ORACLE_MAX_RETRIES", 2),
            tavus_api_key=os.getenv("TAVUS_API_KEY") or None,
            tavus_api_url=os.getenv("TAVUS_API_URL", DEFAULT_TAVUS_URL),
            tavus_webhook_url=os.getenv("TAVUS_WEBHOOK_URL") or None,
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
            openweather_api_url=os.getenv("OPENWEATHER_API_URL", DEFAULT_WEATHER_URL),
            external_context_enabled=_get_bool("EXTERNAL_CONTEXT_ENABLED"),
            nudge_scheduler_enabled=_get_bool("NUDGE_SCHEDULER_ENABLED"),
            nudge_cron_hours=os.getenv("NUDGE_CRON_HOURS", "*/6"),
            scheduler_timezone=os.getenv("SCHEDULER_TIMEZONE", "UTC"),
            chat_rate_limit=os.getenv("CHAT_RATE_LIMIT") or "30/minute",
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.database_url:
            raise ConfigurationError("DATABASE_URL is missing. Please set it in your environment or .env file.")
        if _is_placeholder(self.database_url):
            raise ConfigurationError("DATABASE_URL still contains a placeholder value.")

        if not self.fernet_secret:
            raise ConfigurationError("FERNET_SECRET is missing. Please set it in your environment or .env file.")
        try:
            Fernet(self.fernet_secret)
        except Exception as e:
            raise ConfigurationError(
                "FERNET_SECRET is invalid. Make sure it is a valid 32-byte base64 string."
            ) from e

        if _is_placeholder(self.openai_api_key):
            raise ConfigurationError("OPENAI_API_KEY still contains a placeholder value.")
        if _is_placeholder(self.tavus_api_key):
            raise ConfigurationError("TAVUS_API_KEY still contains a placeholder value.")
        if _is_placeholder(self.openweather_api_key):
            raise ConfigurationError("OPENWEATHER_API_KEY still contains a placeholder value.")

        if self.oracle_timeout_seconds <= 0:
            raise ConfigurationError("ORACLE_TIMEOUT_SECONDS must be positive.")
        if self.oracle_max_retries < 1:
            raise ConfigurationError("ORACLE_MAX_RETRIES must be at least 1.")

        try:
            parse_many(self.chat_rate_limit)
        except ValueError as e:
            raise ConfigurationError(f"CHAT_RATE_LIMIT is not a valid rate: {self.chat_rate_limit!r}") from e

        if not self.openai_api_key:
            logger.warning("⚠️ OPENAI_API_KEY not set. Mentor replies will use static fallbacks.")
        if not self.tavus_api_key:
            logger.warning("⚠️ TAVUS_API_KEY not set. Video features will use mock data.")
