from conftest import FakeOracle

from mentormate.models.chat import ChatMessage
from mentormate.services.nudge_service import process_nudges
from mentormate.services.oracle_service import OracleError


def test_batch_sends_one_message_per_pattern(session_factory, gateway, user, db_session):
    report = process_nudges(session_factory, FakeOracle(replies=["We miss you!"]))

    assert report.success is True
    assert report.nudges_sent == 1
    assert report.details == [{"user_id": user.id, "pattern": "missed_checkins", "severity": "high"}]
    messages = db_session.query(ChatMessage).all()
    assert [m.content for m in messages] == ["We miss you!"]


def test_users_without_onboarding_are_skipped(session_factory, gateway):
    gateway.create_profile("new@example.com", "New User")

    report = process_nudges(session_factory, FakeOracle())

    assert report.success is True
    assert report.nudges_sent == 0


def test_oracle_outage_still_delivers_fallbacks(session_factory, user, mentors):
    report = process_nudges(session_factory, FakeOracle(error=OracleError("503")))

    assert report.nudges_sent == 1
    assert report.failed_users == []


def test_one_failing_user_does_not_stop_the_batch(session_factory, gateway, mentors, monkeypatch):
    broken, _ = gateway.create_profile("broken@example.com", "Broken")
    gateway.complete_onboarding(broken.id, mentors["zenkai"].id)
    healthy, _ = gateway.create_profile("ok@example.com", "Healthy")
    gateway.complete_onboarding(healthy.id, mentors["prof_ada"].id)

    from mentormate.services import nudge_service

    real_nudge_user = nudge_service.nudge_user

    def flaky(gateway, analyzer, generator, dispatcher, user, mentor_cache, now=None):
        if user.id == broken.id:
            raise RuntimeError("boom")
        return real_nudge_user(gateway, analyzer, generator, dispatcher, user, mentor_cache, now=now)

    monkeypatch.setattr(nudge_service, "nudge_user", flaky)

    report = process_nudges(session_factory, FakeOracle())

    assert report.success is True
    assert report.failed_users == [broken.id]
    assert [d["user_id"] for d in report.details] == [healthy.id]


def test_user_listing_failure_reports_error(session_factory, monkeypatch):
    from mentormate.services.data_gateway import DataStoreGateway

    monkeypatch.setattr(DataStoreGateway, "list_onboarded_profiles", lambda self: ([], RuntimeError("db down")))

    report = process_nudges(session_factory, FakeOracle())

    assert report.success is False
    assert "db down" in report.to_dict()["error"]


def test_failed_delivery_keeps_earlier_nudges_and_tries_the_rest(session_factory, user, monkeypatch):
    from mentormate.services.nudge_dispatcher import NudgeDispatchError, NudgeDispatcher
    from mentormate.services.pattern_analyzer import Pattern, PatternAnalyzer, Severity

    patterns = [
        Pattern(type="missed_checkins", severity=Severity.high, data={"days_since_last_checkin": 3}),
        Pattern(type="low_mood", severity=Severity.high, data={"avg_mood": 3.0, "low_mood_count": 3}),
        Pattern(type="goal_struggle", severity=Severity.medium, data={"completion_rate": 20}),
    ]
    monkeypatch.setattr(PatternAnalyzer, "analyze", lambda self, user_id, now=None: list(patterns))

    real_dispatch = NudgeDispatcher.dispatch
    calls = []

    def second_call_fails(self, message, now=None):
        calls.append(message.metadata["pattern_type"])
        if len(calls) == 2:
            raise NudgeDispatchError("Message insert failed: db down")
        return real_dispatch(self, message, now=now)

    monkeypatch.setattr(NudgeDispatcher, "dispatch", second_call_fails)

    report = process_nudges(session_factory, FakeOracle())

    assert calls == ["missed_checkins", "low_mood", "goal_struggle"]
    assert report.success is True
    assert report.nudges_sent == 2
    assert [d["pattern"] for d in report.details] == ["missed_checkins", "goal_struggle"]
    assert report.failed_users == [user.id]

    db = session_factory()
    try:
        assert db.query(ChatMessage).count() == 2
    finally:
        db.close()
