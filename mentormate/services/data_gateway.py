# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Typed CRUD over the relational store.

Every public method returns a ``(data, error)`` pair. On a database error the
session is rolled back, the error is logged, and ``data`` is ``None`` for
single-row reads/writes or ``[]`` for collections. Callers must check
``error`` before trusting ``data``.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mentormate.models.avatar import CustomAvatar, VideoGeneration, AvatarStatus, VideoStatus
from mentormate.models.chat import (
    ChatMessage, ChatSession, MessageType, SenderType, SessionStatus, SessionType
)
from mentormate.models.checkin import Checkin
from mentormate.models.goal import Goal
from mentormate.models.mentor import Mentor, MentorCategory
from mentormate.models.mentor_response import MentorResponse
from mentormate.models.user_profile import UserProfile
from mentormate.utils.time_utils import utcnow, start_of_utc_day

logger = logging.getLogger(__name__)

Result = Tuple[Any, Optional[Exception]]

PROFILE_EDITABLE_FIELDS = {"full_name", "default_mentor_id", "preferred_mode", "custom_voice_id",
                           "active_custom_avatar_id"}
CHECKIN_PROJECTABLE_FIELDS = {"id", "created_at", "mood_score", "goal_status", "emotion_score", "mentor_id"}


class DataStoreGateway:
    def __init__(self, db: Session):
        self.db = db

    def _guard(self, action: str, fn: Callable[[], Any], empty: Any = None) -> Result:
        try:
            return fn(), None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("❌ Data store error during %s: %s", action, e)
            return empty, e

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    # -------------------------------
    # Profiles
    # -------------------------------

    def get_profile(self, user_id: str) -> Result:
        return self._guard("get_profile", lambda: self.db.get(UserProfile, user_id))

    def create_profile(self, email: str, full_name: Optional[str] = None) -> Result:
        return self._guard(
            "create_profile",
            lambda: self._save(UserProfile(email=email, full_name=full_name)),
        )

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Result:
        def _update():
            profile = self.db.get(UserProfile, user_id)
            if profile is None:
                return None
            for field, value in updates.items():
                if field in PROFILE_EDITABLE_FIELDS:
                    setattr(profile, field, value)
            profile.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(profile)
            return profile

        return self._guard("update_profile", _update)

    def complete_onboarding(self, user_id: str, mentor_id: str, preferred_mode=None) -> Result:
        def _complete():
            profile = self.db.get(UserProfile, user_id)
            if profile is None:
                return None
            profile.default_mentor_id = mentor_id
            if preferred_mode is not None:
                profile.preferred_mode = preferred_mode
            profile.onboarding_completed = True
            profile.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(profile)
            return profile

        return self._guard("complete_onboarding", _complete)

    def list_onboarded_profiles(self) -> Result:
        return self._guard(
            "list_onboarded_profiles",
            lambda: self.db.query(UserProfile)
            .filter(UserProfile.onboarding_completed.is_(True))
            .order_by(UserProfile.created_at)
            .all(),
            empty=[],
        )

    # -------------------------------
    # Mentors
    # -------------------------------

    def list_mentors(self) -> Result:
        return self._guard(
            "list_mentors",
            lambda: self.db.query(Mentor).order_by(Mentor.created_at).all(),
            empty=[],
        )

    def get_mentor(self, mentor_id: str) -> Result:
        return self._guard("get_mentor", lambda: self.db.get(Mentor, mentor_id))

    def get_mentor_by_slug(self, slug: str) -> Result:
        return self._guard(
            "get_mentor_by_slug",
            lambda: self.db.query(Mentor).filter(Mentor.slug == slug).first(),
        )

    def mentors_by_category(self, category: MentorCategory) -> Result:
        return self._guard(
            "mentors_by_category",
            lambda: self.db.query(Mentor)
            .filter(Mentor.category == category, Mentor.is_custom.is_(False))
            .order_by(Mentor.created_at)
            .all(),
            empty=[],
        )

    def list_custom_mentors(self, user_id: Optional[str] = None) -> Result:
        def _list():
            query = self.db.query(Mentor).filter(Mentor.is_custom.is_(True))
            if user_id is not None:
                query = query.filter(Mentor.created_by == user_id)
            return query.order_by(Mentor.created_at).all()

        return self._guard("list_custom_mentors", _list, empty=[])

    def create_mentor(self, **fields) -> Result:
        return self._guard("create_mentor", lambda: self._save(Mentor(**fields)))

    # -------------------------------
    # Goals
    # -------------------------------

    def list_active_goals(self, user_id: str) -> Result:
        return self._guard(
            "list_active_goals",
            lambda: self.db.query(Goal)
            .filter(Goal.user_id == user_id, Goal.is_active.is_(True))
            .order_by(Goal.created_at)
            .all(),
            empty=[],
        )

    def get_goals_by_ids(self, user_id: str, goal_ids: Iterable[str]) -> Result:
        ids = list(goal_ids)
        return self._guard(
            "get_goals_by_ids",
            lambda: self.db.query(Goal).filter(Goal.user_id == user_id, Goal.id.in_(ids)).all(),
            empty=[],
        )

    def create_goal(self, user_id: str, text: str) -> Result:
        return self._guard("create_goal", lambda: self._save(Goal(user_id=user_id, text=text)))

    def create_goals(self, user_id: str, texts: Sequence[str]) -> Result:
        def _create():
            goals = [Goal(user_id=user_id, text=text) for text in texts]
            self.db.add_all(goals)
            self.db.commit()
            for goal in goals:
                self.db.refresh(goal)
            return goals

        return self._guard("create_goals", _create, empty=[])

    def update_goal(self, goal_id: str, updates: Dict[str, Any]) -> Result:
        def _update():
            goal = self.db.get(Goal, goal_id)
            if goal is None:
                return None
            for field in ("text", "is_active"):
                if field in updates and updates[field] is not None:
                    setattr(goal, field, updates[field])
            goal.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(goal)
            return goal

        return self._guard("update_goal", _update)

    def soft_delete_goal(self, goal_id: str) -> Result:
        return self.update_goal(goal_id, {"is_active": False})

    # -------------------------------
    # Check-ins
    # -------------------------------

    def create_checkin(self, **fields) -> Result:
        return self._guard("create_checkin", lambda: self._save(Checkin(**fields)))

    def get_checkin(self, checkin_id: str) -> Result:
        return self._guard("get_checkin", lambda: self.db.get(Checkin, checkin_id))

    def recent_checkins(self, user_id: str, limit: int = 20) -> Result:
        """Newest first, at most ``limit`` rows."""
        return self._guard(
            "recent_checkins",
            lambda: self.db.query(Checkin)
            .filter(Checkin.user_id == user_id)
            .order_by(Checkin.created_at.desc())
            .limit(limit)
            .all(),
            empty=[],
        )

    def list_checkins_by_mentor(self, user_id: str, mentor_id: str, limit: int = 10) -> Result:
        return self._guard(
            "list_checkins_by_mentor",
            lambda: self.db.query(Checkin)
            .filter(Checkin.user_id == user_id, Checkin.mentor_id == mentor_id)
            .order_by(Checkin.created_at.desc())
            .limit(limit)
            .all(),
            empty=[],
        )

    def checkins_since(self, user_id: str, since: datetime, columns: Optional[Sequence[str]] = None) -> Result:
        """
        Check-ins created at or after ``since``, newest first. With ``columns``
        the rows are projected to plain dicts holding only those fields.
        """
        if columns:
            unknown = set(columns) - CHECKIN_PROJECTABLE_FIELDS
            if unknown:
                raise ValueError(f"Cannot project check-in columns: {sorted(unknown)}")

        def _query():
            if columns:
                query = self.db.query(*[getattr(Checkin, name) for name in columns])
            else:
                query = self.db.query(Checkin)
            rows = (
                query.filter(Checkin.user_id == user_id, Checkin.created_at >= since)
                .order_by(Checkin.created_at.desc())
                .all()
            )
            if columns:
                return [dict(row._mapping) for row in rows]
            return rows

        return self._guard("checkins_since", _query, empty=[])

    def checkin_streak(self, user_id: str, now: Optional[datetime] = None) -> Result:
        """Consecutive UTC days with at least one check-in, counting back from today."""
        today = start_of_utc_day(now or utcnow()).date()

        def _streak():
            stamps = (
                self.db.query(Checkin.created_at)
                .filter(Checkin.user_id == user_id)
                .order_by(Checkin.created_at.desc())
                .all()
            )
            streak = 0
            expected = today
            for (created_at,) in stamps:
                day = created_at.date()
                if day == expected:
                    streak += 1
                    expected = expected - timedelta(days=1)
                elif day < expected:
                    break
            return streak

        return self._guard("checkin_streak", _streak, empty=0)

    def weekly_stats(self, user_id: str, now: Optional[datetime] = None) -> Result:
        since = (now or utcnow()) - timedelta(days=7)

        def _stats():
            checkins = (
                self.db.query(Checkin)
                .filter(Checkin.user_id == user_id, Checkin.created_at >= since)
                .all()
            )
            total = len(checkins)
            avg_mood = round(sum(c.mood_score for c in checkins) / total) if total else 0

            emotions = [c.emotion_score for c in checkins if c.emotion_score]
            avg_emotion = round(sum(emotions) / len(emotions)) if emotions else 0

            total_goals = 0
            completed_goals = 0
            for c in checkins:
                goals = c.goal_status or []
                total_goals += len(goals)
                completed_goals += sum(1 for g in goals if g.get("completed"))
            completion_rate = round(completed_goals / total_goals * 100) if total_goals else 0

            mentor_usage: Dict[str, int] = {}
            for c in checkins:
                name = c.mentor.name if c.mentor else "Unknown"
                mentor_usage[name] = mentor_usage.get(name, 0) + 1

            return {
                "total_checkins": total,
                "avg_mood": avg_mood,
                "avg_emotion": avg_emotion,
                "completion_rate": completion_rate,
                "mentor_usage": mentor_usage,
            }

        return self._guard("weekly_stats", _stats)

    # -------------------------------
    # Mentor responses
    # -------------------------------

    def create_mentor_response(self, **fields) -> Result:
        return self._guard("create_mentor_response", lambda: self._save(MentorResponse(**fields)))

    def get_mentor_response_for_checkin(self, checkin_id: str) -> Result:
        return self._guard(
            "get_mentor_response_for_checkin",
            lambda: self.db.query(MentorResponse)
            .filter(MentorResponse.checkin_id == checkin_id)
            .order_by(MentorResponse.created_at.desc())
            .first(),
        )

    def list_mentor_responses(self, user_id: str, limit: int = 20) -> Result:
        return self._guard(
            "list_mentor_responses",
            lambda: self.db.query(MentorResponse)
            .filter(MentorResponse.user_id == user_id)
            .order_by(MentorResponse.created_at.desc())
            .limit(limit)
            .all(),
            empty=[],
        )

    # -------------------------------
    # Chat sessions & messages
    # -------------------------------

    def create_chat_session(self, user_id: str, mentor_id: str,
                            session_type: SessionType = SessionType.text) -> Result:
        return self._guard(
            "create_chat_session",
            lambda: self._save(ChatSession(
                user_id=user_id,
                mentor_id=mentor_id,
                session_type=session_type,
                status=SessionStatus.active,
            )),
        )

    def get_chat_session(self, session_id: str) -> Result:
        return self._guard("get_chat_session", lambda: self.db.get(ChatSession, session_id))

    def list_chat_sessions(self, user_id: str, limit: int = 10) -> Result:
        return self._guard(
            "list_chat_sessions",
            lambda: self.db.query(ChatSession)
            .filter(ChatSession.user_id == user_id)
            .order_by(ChatSession.created_at.desc())
            .limit(limit)
            .all(),
            empty=[],
        )

    def find_active_session_today(self, user_id: str, mentor_id: str, now: Optional[datetime] = None) -> Result:
        """Most recent active session for the pair created since 00:00 UTC today."""
        day_start = start_of_utc_day(now or utcnow())
        return self._guard(
            "find_active_session_today",
            lambda: self.db.query(ChatSession)
            .filter(
                ChatSession.user_id == user_id,
                ChatSession.mentor_id == mentor_id,
                ChatSession.status == SessionStatus.active,
                ChatSession.created_at >= day_start,
            )
            .order_by(ChatSession.created_at.desc())
            .first(),
        )

    def end_chat_session(self, session_id: str, now: Optional[datetime] = None) -> Result:
        def _end():
            session = self.db.get(ChatSession, session_id)
            if session is None:
                return None
            ended_at = now or utcnow()
            session.status = SessionStatus.ended
            session.ended_at = ended_at
            if session.started_at:
                session.duration_seconds = max(0, int((ended_at - session.started_at).total_seconds()))
            self.db.commit()
            self.db.refresh(session)
            return session

        return self._guard("end_chat_session", _end)

    def create_chat_message(self, session_id: str, sender_type: SenderType, content: str,
                            message_type: MessageType = MessageType.text,
                            metadata: Optional[Dict[str, Any]] = None,
                            voice_url: Optional[str] = None,
                            duration_ms: Optional[int] = None) -> Result:
        return self._guard(
            "create_chat_message",
            lambda: self._save(ChatMessage(
                session_id=session_id,
                sender_type=sender_type,
                message_type=message_type,
                content=content,
                message_metadata=metadata,
                voice_url=voice_url,
                duration_ms=duration_ms,
            )),
        )

    def list_chat_messages(self, session_id: str) -> Result:
        return self._guard(
            "list_chat_messages",
            lambda: self.db.query(ChatMessage)
            .filter(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.created_at.asc())
            .all(),
            empty=[],
        )

    # -------------------------------
    # Avatars & video jobs
    # -------------------------------

    def create_video_generation(self, **fields) -> Result:
        return self._guard("create_video_generation", lambda: self._save(VideoGeneration(**fields)))

    def create_custom_avatar(self, **fields) -> Result:
        return self._guard("create_custom_avatar", lambda: self._save(CustomAvatar(**fields)))

    def list_custom_avatars(self, user_id: str) -> Result:
        return self._guard(
            "list_custom_avatars",
            lambda: self.db.query(CustomAvatar)
            .filter(CustomAvatar.user_id == user_id)
            .order_by(CustomAvatar.created_at.desc())
            .all(),
            empty=[],
        )

    def _update_where(self, action: str, model, column, value, fields: Dict[str, Any]) -> Result:
        def _update():
            count = (
                self.db.query(model)
                .filter(column == value)
                .update(fields, synchronize_session=False)
            )
            self.db.commit()
            return count

        return self._guard(action, _update, empty=0)

    def update_avatar_status(self, tavus_avatar_id: str, status: AvatarStatus) -> Result:
        return self._update_where(
            "update_avatar_status", CustomAvatar, CustomAvatar.tavus_avatar_id, tavus_avatar_id,
            {"status": status, "updated_at": utcnow()},
        )

    def update_video_generation(self, tavus_request_id: str, status: VideoStatus, **fields) -> Result:
        values = {"status": status, "updated_at": utcnow()}
        values.update(fields)
        return self._update_where(
            "update_video_generation", VideoGeneration, VideoGeneration.tavus_request_id, tavus_request_id,
            values,
        )

    def update_mentor_response_video(self, tavus_video_id: str, video_url: Optional[str]) -> Result:
        return self._update_where(
            "update_mentor_response_video", MentorResponse, MentorResponse.tavus_video_id, tavus_video_id,
            {"video_url": video_url},
        )

    def touch_profile_voice(self, voice_id: str) -> Result:
        return self._update_where(
            "touch_profile_voice", UserProfile, UserProfile.custom_voice_id, voice_id,
            {"updated_at": utcnow()},
        )
