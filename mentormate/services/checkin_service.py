# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from mentormate.models.user_profile import InteractionMode
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.mentor_reply_service import generate_mentor_reply
from mentormate.services.oracle_service import MentorOracle
from mentormate.services.tavus_service import TavusClient, request_checkin_video
from mentormate.utils.http_utils import ensure_found
from mentormate.utils.prompt_templates import PromptContext, PromptSessionType, checkin_user_message

logger = logging.getLogger(__name__)


@dataclass
class CheckinResult:
    checkin: Any
    mentor_response: Any
    response_text: str
    streak: int
    is_fallback: bool
    video_job: Any = None


def snapshot_goals(gateway: DataStoreGateway, user_id: str, statuses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Copy the current goal text into each status entry so later edits to a
    goal never rewrite check-in history.
    """
    if not statuses:
        return []

    goal_ids = [s["goal_id"] for s in statuses]
    goals, error = gateway.get_goals_by_ids(user_id, goal_ids)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load goals")

    by_id = {g.id: g for g in goals}
    missing = [gid for gid in goal_ids if gid not in by_id]
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown goal ids: {', '.join(missing)}")

    return [
        {
            "goal_id": s["goal_id"],
            "goal_text": by_id[s["goal_id"]].text,
            "completed": bool(s.get("completed")),
            "notes": s.get("notes"),
        }
        for s in statuses
    ]


def submit_checkin(gateway: DataStoreGateway, oracle: MentorOracle, user_id: str, mentor_id: str,
                   mood_score: int, reflection: Optional[str] = None,
                   goal_status: Optional[List[Dict[str, Any]]] = None,
                   mode: InteractionMode = InteractionMode.classic, emotion_score: Optional[int] = None,
                   tavus: Optional[TavusClient] = None, external_data=None) -> CheckinResult:
    user = ensure_found(*gateway.get_profile(user_id), what="user profile")
    mentor = ensure_found(*gateway.get_mentor(mentor_id), what="mentor")

    goals = snapshot_goals(gateway, user_id, goal_status or [])

    checkin, error = gateway.create_checkin(
        user_id=user_id,
        mentor_id=mentor_id,
        mode=mode,
        mood_score=mood_score,
        reflection=reflection,
        goal_status=goals,
        emotion_score=emotion_score,
    )
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not save check-in")

    streak, error = gateway.checkin_streak(user_id)
    if error is not None:
        logger.warning("⚠️ Streak unavailable for user %s", user_id)
        streak = 0

    context = PromptContext(
        mood_score=mood_score,
        goals=goals,
        reflection=reflection,
        streak=streak,
        user_name=user.full_name,
    )

    started = time.perf_counter()
    reply = generate_mentor_reply(
        oracle, mentor, checkin_user_message(mood_score),
        context=context, session_type=PromptSessionType.checkin, external_data=external_data,
    )
    generation_time_ms = int((time.perf_counter() - started) * 1000)

    mentor_response, error = gateway.create_mentor_response(
        checkin_id=checkin.id,
        mentor_id=mentor.id,
        user_id=user_id,
        prompt_data={"mood_score": mood_score, "goals": goals, "streak": streak, "session_type": "checkin"},
        response_text=reply.response,
        response_metadata=reply.metadata,
        generation_time_ms=generation_time_ms,
    )
    if error is not None:
        # The check-in itself is saved; the reply is still returned to the user
        logger.error("❌ Mentor response not stored for check-in %s", checkin.id)

    video_job = None
    if tavus is not None and mode == InteractionMode.realtime and mentor.tavus_avatar_id:
        video_job = request_checkin_video(
            gateway, tavus, user_id, mentor.tavus_avatar_id, reply.response,
            checkin_id=checkin.id, mentor_response=mentor_response,
        )

    logger.info("✅ Check-in %s saved for user %s (streak %d)", checkin.id, user_id, streak)
    return CheckinResult(
        checkin=checkin,
        mentor_response=mentor_response,
        response_text=reply.response,
        streak=streak,
        is_fallback=reply.is_fallback,
        video_job=video_job,
    )
