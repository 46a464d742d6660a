# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
import sys
from datetime import timedelta

from cryptography.fernet import Fernet

# Encrypted columns need a key before any model is imported
os.environ.setdefault("FERNET_SECRET", Fernet.generate_key().decode())

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from fastapi.testclient import TestClient

from mentormate.main import create_app
from mentormate.models.checkin import Checkin
from mentormate.models.database import build_engine, build_session_factory, create_all_tables
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.mentor_seed import seed_builtin_mentors
from mentormate.services.oracle_service import MentorOracle, OracleCompletion
from mentormate.services.realtime_hub import RealtimeHub
from mentormate.services.tavus_service import TavusClient
from mentormate.utils.encryption import configure_encryption
from mentormate.utils.rate_limit_utils import limiter
from mentormate.utils.settings import Settings
from mentormate.utils.time_utils import utcnow

TEST_SECRET = os.environ["FERNET_SECRET"]


class FakeOracle(MentorOracle):
    """Scripted stand-in for the completions API."""

    model = "fake-model"

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def complete(self, messages, max_tokens=200, temperature=0.7):
        self.calls.append({"messages": messages, "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        text = self.replies.pop(0) if self.replies else "You are doing great, keep going."
        return OracleCompletion(
            text=text,
            model=self.model,
            usage={"prompt_tokens": 42, "completion_tokens": 12, "total_tokens": 54},
        )


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", fernet_secret=TEST_SECRET)


@pytest.fixture
def engine(settings):
    configure_encryption(settings.fernet_secret)
    engine = build_engine(settings.database_url)
    create_all_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    seed_builtin_mentors(db)
    yield db
    db.close()


@pytest.fixture
def gateway(db_session):
    return DataStoreGateway(db_session)


@pytest.fixture
def mentors(gateway):
    rows, _ = gateway.list_mentors()
    return {m.slug: m for m in rows}


@pytest.fixture
def user(gateway, mentors):
    profile, _ = gateway.create_profile("sam@example.com", "Sam Rivera")
    profile, _ = gateway.complete_onboarding(profile.id, mentors["coach_lex"].id)
    return profile


@pytest.fixture
def make_checkin(db_session):
    def _make(user_id, mentor_id, mood, days_ago=0, hours_ago=0, goals=None, now=None):
        checkin = Checkin(
            user_id=user_id,
            mentor_id=mentor_id,
            mood_score=mood,
            goal_status=goals or [],
            created_at=(now or utcnow()) - timedelta(days=days_ago, hours=hours_ago),
        )
        db_session.add(checkin)
        db_session.commit()
        return checkin

    return _make


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def hub():
    return RealtimeHub()


@pytest.fixture
def client(settings, engine, oracle, hub):
    limiter.reset()
    app = create_app(settings, engine=engine, oracle=oracle, tavus=TavusClient(api_key=None), hub=hub)
    with TestClient(app) as test_client:
        yield test_client
