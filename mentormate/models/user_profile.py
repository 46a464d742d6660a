# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import enum
import uuid
from sqlalchemy import Column, String, DateTime, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from mentormate.models.database import Base
from mentormate.utils.time_utils import utcnow


class InteractionMode(enum.Enum):
    classic = "classic"
    realtime = "realtime"


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=True)

    default_mentor_id = Column(String(36), ForeignKey("mentors.id"), nullable=True)
    preferred_mode = Column(Enum(InteractionMode), default=InteractionMode.classic, nullable=False)
    onboarding_completed = Column(Boolean, default=False, nullable=False, index=True)

    # ✅ Video avatar links
    custom_voice_id = Column(String, nullable=True, index=True)
    active_custom_avatar_id = Column(String(36), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    default_mentor = relationship("Mentor", foreign_keys=[default_mentor_id])

    def __repr__(self):
        return f"<UserProfile id={self.id} onboarded={self.onboarding_completed}>"
