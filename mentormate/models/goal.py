# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from mentormate.models.database import Base
from mentormate.utils.time_utils import utcnow


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # soft delete flag

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Goal id={self.id} active={self.is_active}>"
