# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# -------------------------------
# Thresholds
# -------------------------------

MISSED_WINDOW_DAYS = 3
MOOD_WINDOW_DAYS = 7
GOAL_WINDOW_DAYS = 14

LOW_MOOD_MIN_CHECKINS = 3
LOW_MOOD_MAX_AVG = 5
LOW_MOOD_SCORE = 4
LOW_MOOD_MIN_LOW_COUNT = 2

GOAL_STRUGGLE_MIN_CHECKINS = 5
GOAL_STRUGGLE_MAX_RATE = 40

CELEBRATION_MIN_CHECKINS = 5
CELEBRATION_RECENT_COUNT = 3
CELEBRATION_MIN_AVG = 8


class PatternType(str, enum.Enum):
    missed_checkins = "missed_checkins"
    low_mood = "low_mood"
    goal_struggle = "goal_struggle"
    celebration = "celebration"


class Severity(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


@dataclass(frozen=True)
class Pattern:
    type: str
    severity: Severity
    data: Dict[str, Any] = field(default_factory=dict)


def compute_completion_rate(goal_snapshots: Sequence[Sequence[dict]]) -> Dict[str, float]:
    """
    Aggregates GoalStatus snapshots across check-ins. Order of the input does
    not matter; an empty goal set yields a 0% rate.
    """
    total_goals = 0
    completed_goals = 0
    for goals in goal_snapshots:
        goals = goals or []
        total_goals += len(goals)
        completed_goals += sum(1 for g in goals if g.get("completed"))

    completion_rate = (completed_goals / total_goals) * 100 if total_goals > 0 else 0
    return {"completion_rate": completion_rate, "total_goals": total_goals, "completed_goals": completed_goals}


class PatternAnalyzer:
    """
    Classifies a user's recent check-in history into behavioural patterns.

    Rules run in a fixed order (missed_checkins, low_mood, goal_struggle,
    celebration) and are independent, so one pass may emit 0 to 4 patterns.
    """

    def __init__(self, gateway: DataStoreGateway):
        self.gateway = gateway

    def analyze(self, user_id: str, now: Optional[datetime] = None) -> List[Pattern]:
        now = now or utcnow()
        patterns: List[Pattern] = []

        recent, recent_error = self.gateway.checkins_since(
            user_id, now - timedelta(days=MISSED_WINDOW_DAYS), columns=("created_at", "mood_score")
        )
        weekly, weekly_error = self.gateway.checkins_since(
            user_id, now - timedelta(days=MOOD_WINDOW_DAYS), columns=("created_at", "mood_score")
        )
        fortnight, fortnight_error = self.gateway.checkins_since(
            user_id, now - timedelta(days=GOAL_WINDOW_DAYS), columns=("goal_status",)
        )

        # A failed read must not look like a missed check-in
        if recent_error is None:
            missed = self._missed_checkins(recent)
            if missed:
                patterns.append(missed)
        else:
            logger.warning("⚠️ Skipping missed_checkins for user %s: %s", user_id, recent_error)

        if weekly_error is not None:
            logger.warning("⚠️ Weekly check-in read failed for user %s: %s", user_id, weekly_error)
            weekly = []
        if fortnight_error is not None:
            logger.warning("⚠️ Two-week check-in read failed for user %s: %s", user_id, fortnight_error)
            fortnight = []

        for rule in (self._low_mood(weekly), self._goal_struggle(fortnight), self._celebration(weekly)):
            if rule:
                patterns.append(rule)

        logger.info("🔍 User %s patterns: %s", user_id, [p.type for p in patterns])
        return patterns

    # -------------------------------
    # Rules
    # -------------------------------

    @staticmethod
    def _missed_checkins(recent: Sequence[dict]) -> Optional[Pattern]:
        if recent:
            return None
        return Pattern(
            type=PatternType.missed_checkins.value,
            severity=Severity.high,
            data={"days_missed": MISSED_WINDOW_DAYS},
        )

    @staticmethod
    def _low_mood(weekly: Sequence[dict]) -> Optional[Pattern]:
        if len(weekly) < LOW_MOOD_MIN_CHECKINS:
            return None

        avg_mood = sum(c["mood_score"] for c in weekly) / len(weekly)
        low_mood_count = sum(1 for c in weekly if c["mood_score"] <= LOW_MOOD_SCORE)

        if avg_mood <= LOW_MOOD_MAX_AVG and low_mood_count >= LOW_MOOD_MIN_LOW_COUNT:
            return Pattern(
                type=PatternType.low_mood.value,
                severity=Severity.high,
                data={"avg_mood": avg_mood, "low_mood_count": low_mood_count},
            )
        return None

    @staticmethod
    def _goal_struggle(fortnight: Sequence[dict]) -> Optional[Pattern]:
        if len(fortnight) < GOAL_STRUGGLE_MIN_CHECKINS:
            return None

        stats = compute_completion_rate([c.get("goal_status") for c in fortnight])
        if stats["completion_rate"] < GOAL_STRUGGLE_MAX_RATE:
            return Pattern(
                type=PatternType.goal_struggle.value,
                severity=Severity.medium,
                data={"completion_rate": stats["completion_rate"], "total_goals": stats["total_goals"]},
            )
        return None

    @staticmethod
    def _celebration(weekly: Sequence[dict]) -> Optional[Pattern]:
        if len(weekly) < CELEBRATION_MIN_CHECKINS:
            return None

        newest_first = sorted(weekly, key=lambda c: c["created_at"], reverse=True)
        recent_moods = [c["mood_score"] for c in newest_first[:CELEBRATION_RECENT_COUNT]]
        avg_recent_mood = sum(recent_moods) / len(recent_moods)

        if avg_recent_mood >= CELEBRATION_MIN_AVG:
            return Pattern(
                type=PatternType.celebration.value,
                severity=Severity.low,
                data={"avg_mood": avg_recent_mood, "streak_length": len(weekly)},
            )
        return None
