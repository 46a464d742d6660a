# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mentormate.models.user_profile import InteractionMode


class GoalStatusIn(BaseModel):
    goal_id: str
    completed: bool = False
    notes: Optional[str] = None


class CheckinRequest(BaseModel):
    user_id: str
    mentor_id: str
    mood_score: int = Field(ge=1, le=10)
    reflection: Optional[str] = None
    goal_status: List[GoalStatusIn] = []
    mode: InteractionMode = InteractionMode.classic
    emotion_score: Optional[int] = Field(default=None, ge=0, le=100)


class CheckinOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    mentor_id: str
    mode: InteractionMode
    mood_score: int
    reflection: Optional[str] = None
    goal_status: List[Dict[str, Any]] = []
    emotion_score: Optional[int] = None
    video_url: Optional[str] = None
    created_at: datetime


class CheckinResponse(BaseModel):
    checkin: CheckinOut
    mentor_response: str
    mentor_response_id: Optional[str] = None
    streak: int
    is_fallback: bool
    video_job_id: Optional[str] = None


class WeeklyStats(BaseModel):
    total_checkins: int
    avg_mood: int
    avg_emotion: int
    completion_rate: int
    mentor_usage: Dict[str, int]


class MentorResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    checkin_id: str
    mentor_id: str
    response_text: str
    response_metadata: Optional[Dict[str, Any]] = None
    tavus_video_id: Optional[str] = None
    video_url: Optional[str] = None
    generation_time_ms: Optional[int] = None
    created_at: datetime
