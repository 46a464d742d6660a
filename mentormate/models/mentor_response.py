# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import uuid
from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey
from mentormate.models.database import Base
from mentormate.utils.encryption import EncryptedTypeHybrid  # 🔐
from mentormate.utils.time_utils import utcnow


class MentorResponse(Base):
    __tablename__ = "mentor_responses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    checkin_id = Column(String(36), ForeignKey("checkins.id"), nullable=False, index=True)
    mentor_id = Column(String(36), ForeignKey("mentors.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False, index=True)

    prompt_data = Column(JSON, nullable=False)
    response_text = Column(EncryptedTypeHybrid, nullable=False)  # 🔐 Encrypted
    response_metadata = Column(JSON, nullable=True)

    tavus_video_id = Column(String, nullable=True, index=True)
    video_url = Column(String, nullable=True)
    generation_time_ms = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=utcnow)
