import pytest
from cryptography.fernet import Fernet

from mentormate.utils.settings import ConfigurationError, Settings

KEY = Fernet.generate_key().decode()


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("ENV", "production")  # keeps a local .env out of the test
    for name in ("OPENAI_API_KEY", "TAVUS_API_KEY", "ORACLE_TIMEOUT_SECONDS", "NUDGE_SCHEDULER_ENABLED",
                 "CHAT_RATE_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///mentormate.db")
    monkeypatch.setenv("FERNET_SECRET", KEY)
    return monkeypatch


def test_defaults(env):
    settings = Settings.from_env()

    assert settings.openai_model == "gpt-4o-mini"
    assert settings.oracle_timeout_seconds == 20.0
    assert settings.nudge_scheduler_enabled is False
    assert settings.openai_api_key is None


def test_scheduler_flag(env):
    env.setenv("NUDGE_SCHEDULER_ENABLED", "true")
    env.setenv("NUDGE_CRON_HOURS", "*/2")

    settings = Settings.from_env()

    assert settings.nudge_scheduler_enabled is True
    assert settings.nudge_cron_hours == "*/2"


@pytest.mark.parametrize("name, value", [
    ("DATABASE_URL", ""),
    ("FERNET_SECRET", "not-a-key"),
    ("ORACLE_TIMEOUT_SECONDS", "soon"),
    ("ORACLE_TIMEOUT_SECONDS", "0"),
    ("OPENAI_API_KEY", "your-openai-key"),
])
def test_invalid_configuration_is_fatal(env, name, value):
    env.setenv(name, value)

    with pytest.raises(ConfigurationError):
        Settings.from_env()


def test_chat_rate_limit(env):
    assert Settings.from_env().chat_rate_limit == "30/minute"

    env.setenv("CHAT_RATE_LIMIT", "5/second")
    assert Settings.from_env().chat_rate_limit == "5/second"

    env.setenv("CHAT_RATE_LIMIT", "lots")
    with pytest.raises(ConfigurationError):
        Settings.from_env()
