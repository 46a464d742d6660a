# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, JSON, ForeignKey
from mentormate.models.database import Base
from mentormate.utils.time_utils import utcnow


class AvatarStatus(enum.Enum):
    creating = "creating"
    training = "training"
    ready = "ready"
    failed = "failed"


class VideoStatus(enum.Enum):
    queued = "queued"
    generating = "generating"
    completed = "completed"
    failed = "failed"


class CustomAvatar(Base):
    __tablename__ = "custom_avatars"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False)
    name = Column(String, nullable=False)
    tavus_avatar_id = Column(String, nullable=True, index=True)
    status = Column(Enum(AvatarStatus), default=AvatarStatus.creating, nullable=False)
    avatar_type = Column(String, default="standard")
    configuration = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class VideoGeneration(Base):
    __tablename__ = "video_generations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False)
    checkin_id = Column(String(36), ForeignKey("checkins.id"), nullable=True)
    mentor_response_id = Column(String(36), ForeignKey("mentor_responses.id"), nullable=True)
    avatar_id = Column(String, nullable=False)
    script_text = Column(Text, nullable=False)

    tavus_request_id = Column(String, nullable=True, index=True)
    status = Column(Enum(VideoStatus), default=VideoStatus.queued, nullable=False)
    video_url = Column(String, nullable=True)
    thumbnail_url = Column(String, nullable=True)
    error_message = Column(Text, nullable=True)
    job_metadata = Column("metadata", JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
