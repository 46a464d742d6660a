# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import enum
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Enum, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from mentormate.models.database import Base
from mentormate.utils.encryption import EncryptedTypeHybrid  # 🔐
from mentormate.utils.time_utils import utcnow


class SessionType(enum.Enum):
    text = "text"
    voice = "voice"
    video = "video"


class SessionStatus(enum.Enum):
    active = "active"
    paused = "paused"
    ended = "ended"


class SenderType(enum.Enum):
    user = "user"
    mentor = "mentor"
    system = "system"


class MessageType(enum.Enum):
    text = "text"
    voice = "voice"
    system = "system"


class ChatSession(Base):
    __tablename__ = "chat_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id"), nullable=False)
    mentor_id = Column(String(36), ForeignKey("mentors.id"), nullable=False)
    session_type = Column(Enum(SessionType), default=SessionType.text, nullable=False)
    status = Column(Enum(SessionStatus), default=SessionStatus.active, nullable=False)
    duration_seconds = Column(Integer, default=0, nullable=False)

    started_at = Column(DateTime, default=utcnow)
    ended_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    mentor = relationship("Mentor")

    __table_args__ = (
        Index("ix_session_user_mentor_status", "user_id", "mentor_id", "status", "created_at"),
    )

    def __repr__(self):
        return f"<ChatSession id={self.id} status={self.status.value}>"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(36), ForeignKey("chat_sessions.id"), nullable=False)
    sender_type = Column(Enum(SenderType), nullable=False)
    message_type = Column(Enum(MessageType), default=MessageType.text, nullable=False)

    content = Column(EncryptedTypeHybrid, nullable=False)  # ✅ Encrypted message
    voice_url = Column(String, nullable=True)
    duration_ms = Column(Integer, nullable=True)
    # "metadata" is reserved on declarative classes
    message_metadata = Column("metadata", JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_message_session_created", "session_id", "created_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "session_id": self.session_id,
            "sender_type": self.sender_type.value,
            "message_type": self.message_type.value,
            "content": self.content,
            "voice_url": self.voice_url,
            "duration_ms": self.duration_ms,
            "metadata": self.message_metadata,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
