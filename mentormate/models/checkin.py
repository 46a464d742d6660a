# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from sqlalchemy import Column, String, Integer, DateTime, Enum, JSON, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from mentormate.models.database import Base
from mentormate.models.user_profile import InteractionMode
from mentormate.utils.encryption import EncryptedTypeHybrid  # 🔐
from mentormate.utils.time_utils import utcnow


class Checkin(Base):
    __tablename__ = "checkins"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False)
    mentor_id = Column(String(36), ForeignKey("mentors.id"), nullable=False)
    mode = Column(Enum(InteractionMode), default=InteractionMode.classic, nullable=False)

    mood_score = Column(Integer, nullable=False)
    reflection = Column(EncryptedTypeHybrid, nullable=True)  # 🔐 Encrypted
    # Snapshot of [{goal_id, goal_text, completed, notes}] taken at submission
    goal_status = Column(JSON, nullable=False, default=list)
    emotion_score = Column(Integer, nullable=True)
    video_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    mentor = relationship("Mentor")

    __table_args__ = (
        CheckConstraint("mood_score >= 1 AND mood_score <= 10", name="ck_checkin_mood_range"),
        Index("ix_checkin_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Checkin id={self.id} mood={self.mood_score}>"
