from datetime import datetime, timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from mentormate.models.avatar import AvatarStatus
from mentormate.models.mentor import MentorCategory

NOW = datetime(2025, 6, 15, 12, 0, 0)


def test_streak_counts_consecutive_days(gateway, user, make_checkin):
    for days_ago in (0, 1, 1, 2, 4):
        make_checkin(user.id, user.default_mentor_id, 7, days_ago=days_ago, now=NOW)

    streak, error = gateway.checkin_streak(user.id, now=NOW)

    assert error is None
    assert streak == 3


def test_streak_is_zero_without_checkin_today(gateway, user, make_checkin):
    make_checkin(user.id, user.default_mentor_id, 7, days_ago=1, now=NOW)

    assert gateway.checkin_streak(user.id, now=NOW) == (0, None)


def test_weekly_stats(gateway, user, mentors, make_checkin):
    make_checkin(user.id, mentors["coach_lex"].id, 6, days_ago=1, now=NOW,
                 goals=[{"goal_id": "a", "completed": True}, {"goal_id": "b", "completed": False}])
    make_checkin(user.id, mentors["zenkai"].id, 9, days_ago=2, now=NOW,
                 goals=[{"goal_id": "a", "completed": True}])
    make_checkin(user.id, mentors["zenkai"].id, 1, days_ago=10, now=NOW)

    stats, error = gateway.weekly_stats(user.id, now=NOW)

    assert error is None
    assert stats == {
        "total_checkins": 2,
        "avg_mood": 8,
        "avg_emotion": 0,
        "completion_rate": 67,
        "mentor_usage": {"Coach Lex": 1, "ZenKai": 1},
    }


def test_checkins_since_projects_columns_newest_first(gateway, user, make_checkin):
    make_checkin(user.id, user.default_mentor_id, 3, days_ago=2, now=NOW)
    make_checkin(user.id, user.default_mentor_id, 8, days_ago=1, now=NOW)

    rows, error = gateway.checkins_since(user.id, NOW - timedelta(days=7), columns=("created_at", "mood_score"))

    assert error is None
    assert [r["mood_score"] for r in rows] == [8, 3]
    assert set(rows[0]) == {"created_at", "mood_score"}


def test_checkins_since_rejects_unknown_columns(gateway, user):
    with pytest.raises(ValueError):
        gateway.checkins_since(user.id, NOW, columns=("reflection",))


def test_reflection_is_encrypted_at_rest(gateway, db_session, user):
    checkin, _ = gateway.create_checkin(user_id=user.id, mentor_id=user.default_mentor_id,
                                        mood_score=5, reflection="Felt tired after work")

    stored = db_session.execute(
        text("SELECT reflection FROM checkins WHERE id = :id"), {"id": checkin.id}
    ).scalar()

    assert stored != "Felt tired after work"
    db_session.expire_all()
    reloaded, _ = gateway.get_checkin(checkin.id)
    assert reloaded.reflection == "Felt tired after work"


def test_mood_out_of_range_is_rejected(gateway, user):
    checkin, error = gateway.create_checkin(user_id=user.id, mentor_id=user.default_mentor_id, mood_score=11)

    assert checkin is None
    assert error is not None


def test_soft_delete_hides_goal(gateway, user):
    goals, _ = gateway.create_goals(user.id, ["Run 5k", "Sleep by 11"])

    deleted, error = gateway.soft_delete_goal(goals[0].id)

    assert error is None
    assert deleted.is_active is False
    active, _ = gateway.list_active_goals(user.id)
    assert [g.text for g in active] == ["Sleep by 11"]


def test_update_profile_ignores_unknown_fields(gateway, user):
    profile, _ = gateway.update_profile(user.id, {"full_name": "Sam R.", "email": "hijack@example.com"})

    assert profile.full_name == "Sam R."
    assert profile.email == "sam@example.com"


def test_mentors_by_category_excludes_custom(gateway, user):
    gateway.create_mentor(name="My Coach", category=MentorCategory.fitness, is_custom=True, created_by=user.id)

    fitness, _ = gateway.mentors_by_category(MentorCategory.fitness)
    custom, _ = gateway.list_custom_mentors(user.id)

    assert [m.slug for m in fitness] == ["coach_lex"]
    assert [m.name for m in custom] == ["My Coach"]


def test_end_chat_session_records_duration(gateway, user):
    session, _ = gateway.create_chat_session(user.id, user.default_mentor_id)

    ended, error = gateway.end_chat_session(session.id, now=session.started_at + timedelta(seconds=95))

    assert error is None
    assert ended.status.value == "ended"
    assert ended.duration_seconds == 95


def test_database_errors_become_error_tuples(gateway, monkeypatch):
    def fail():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(gateway.db, "query", lambda *a, **k: fail())

    mentors, error = gateway.list_mentors()

    assert mentors == []
    assert isinstance(error, OperationalError)


def test_update_by_tavus_id_reports_row_count(gateway, user):
    gateway.create_custom_avatar(user_id=user.id, name="Me", tavus_avatar_id="r-123")

    assert gateway.update_avatar_status("r-123", AvatarStatus.ready)[0] == 1
    assert gateway.update_avatar_status("missing", AvatarStatus.ready)[0] == 0


def test_recent_checkins_newest_first_and_limited(gateway, user, mentors, make_checkin):
    for days_ago, mood in ((3, 4), (0, 8), (1, 6), (2, 5)):
        make_checkin(user.id, mentors["coach_lex"].id, mood, days_ago=days_ago, now=NOW)

    checkins, error = gateway.recent_checkins(user.id, limit=3)

    assert error is None
    assert [c.mood_score for c in checkins] == [8, 6, 5]


def test_checkins_by_mentor_only_returns_that_mentor(gateway, user, mentors, make_checkin):
    make_checkin(user.id, mentors["coach_lex"].id, 7, days_ago=1, now=NOW)
    make_checkin(user.id, mentors["zenkai"].id, 3, days_ago=0, now=NOW)

    checkins, error = gateway.list_checkins_by_mentor(user.id, mentors["coach_lex"].id)

    assert error is None
    assert [c.mood_score for c in checkins] == [7]
