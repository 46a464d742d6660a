# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mentormate.models.chat import SessionStatus, SessionType


class StartSessionRequest(BaseModel):
    user_id: str
    mentor_id: str
    session_type: SessionType = SessionType.text


class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1, max_length=4000)


class ChatSessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    mentor_id: str
    session_type: SessionType
    status: SessionStatus
    duration_seconds: int = 0
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: datetime


class ChatMessageOut(BaseModel):
    id: str
    session_id: str
    sender_type: str
    message_type: str
    content: str
    voice_url: Optional[str] = None
    duration_ms: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class ChatExchangeOut(BaseModel):
    user_message: ChatMessageOut
    mentor_message: ChatMessageOut
    is_fallback: bool


class ChatHistoryOut(BaseModel):
    session_id: str
    messages: List[ChatMessageOut]
