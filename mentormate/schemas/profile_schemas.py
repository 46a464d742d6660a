# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from mentormate.models.user_profile import InteractionMode


class ProfileCreateRequest(BaseModel):
    email: str
    full_name: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    default_mentor_id: Optional[str] = None
    preferred_mode: Optional[InteractionMode] = None
    custom_voice_id: Optional[str] = None
    active_custom_avatar_id: Optional[str] = None


class OnboardingRequest(BaseModel):
    mentor_id: str
    preferred_mode: Optional[InteractionMode] = None
    goals: List[str] = []


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: Optional[str] = None
    default_mentor_id: Optional[str] = None
    preferred_mode: InteractionMode
    onboarding_completed: bool
    custom_voice_id: Optional[str] = None
    active_custom_avatar_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
