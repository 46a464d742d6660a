import random

from conftest import FakeOracle

from mentormate.models.mentor import MentorCategory
from mentormate.services.message_generator import MessageGenerator, message_category
from mentormate.services.oracle_service import DisabledOracle, OracleError
from mentormate.services.pattern_analyzer import Pattern, Severity
from mentormate.utils.fallback_messages import (
    GENERIC_NUDGE_FALLBACKS, GENERIC_SUPPORTIVE_MESSAGE, NUDGE_FALLBACKS, MentorKey,
    nudge_fallback, reply_fallback, REPLY_FALLBACKS,
)

COACH_LEX_CELEBRATION = (
    "YESSS! 🙌 Look at you absolutely CRUSHING it! Your positive energy and consistency are off the charts! "
    "Keep this momentum going - you're in beast mode and I'm here for it!"
)

CELEBRATION = Pattern(type="celebration", severity=Severity.low, data={"avg_mood": 8.7, "streak_length": 6})
LOW_MOOD = Pattern(type="low_mood", severity=Severity.high, data={"avg_mood": 3.3, "low_mood_count": 3})


def test_coach_lex_celebration_fallback_is_verbatim(mentors, user):
    message = MessageGenerator(DisabledOracle()).generate(CELEBRATION, mentors["coach_lex"], user)

    assert message.content == COACH_LEX_CELEBRATION
    assert message.message_type == "celebration"
    assert message.metadata["ai_generated"] is False
    assert message.metadata["fallback"] is True
    assert message.metadata["pattern_type"] == "celebration"
    assert message.mentor_id == mentors["coach_lex"].id
    assert message.user_id == user.id


def test_oracle_reply_is_used_and_trimmed(mentors, user):
    oracle = FakeOracle(replies=["  Take a short walk today, Sam.  "])

    message = MessageGenerator(oracle).generate(LOW_MOOD, mentors["zenkai"], user)

    assert message.content == "Take a short walk today, Sam."
    assert message.message_type == "nudge"
    assert message.metadata["ai_generated"] is True
    assert "fallback" not in message.metadata
    call = oracle.calls[0]
    assert call["max_tokens"] == 200
    assert call["temperature"] == 0.7
    assert call["messages"][0]["role"] == "system"
    assert "avg: 3.3/10" in call["messages"][0]["content"]


def test_empty_oracle_reply_falls_back(mentors, user):
    message = MessageGenerator(FakeOracle(replies=["   "])).generate(LOW_MOOD, mentors["no_bs_tony"], user)

    assert message.content == NUDGE_FALLBACKS[MentorKey.no_bs_tony]["low_mood"]
    assert message.metadata["fallback"] is True


def test_unexpected_oracle_exception_falls_back(mentors, user):
    oracle = FakeOracle(error=KeyError("choices"))

    message = MessageGenerator(oracle).generate(LOW_MOOD, mentors["prof_ada"], user)

    assert message.content == NUDGE_FALLBACKS[MentorKey.prof_ada]["low_mood"]


def test_custom_mentor_gets_pattern_only_fallback(gateway, user):
    custom, _ = gateway.create_mentor(name="Coach Lex", category=MentorCategory.custom, is_custom=True)
    oracle = FakeOracle(error=OracleError("timeout"))

    message = MessageGenerator(oracle).generate(CELEBRATION, custom, user)

    # Tables are keyed by slug, so a custom mentor reusing a built-in name gets the generic text
    assert message.content == GENERIC_NUDGE_FALLBACKS["celebration"]


def test_unknown_pattern_gets_generic_supportive_message():
    assert nudge_fallback("zenkai", "burnout") == GENERIC_SUPPORTIVE_MESSAGE
    assert nudge_fallback(None, "burnout") == GENERIC_SUPPORTIVE_MESSAGE


def test_message_category():
    assert message_category("celebration") == "celebration"
    for pattern_type in ("missed_checkins", "low_mood", "goal_struggle"):
        assert message_category(pattern_type) == "nudge"


def test_reply_fallback_stays_in_persona():
    rng = random.Random(7)
    assert reply_fallback("coach_lex", rng=rng) in REPLY_FALLBACKS[MentorKey.coach_lex]
    assert reply_fallback("someone-else", rng=rng)
