# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import HTTPException

from mentormate.models.chat import MessageType, SenderType, SessionStatus, SessionType
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.mentor_reply_service import generate_mentor_reply
from mentormate.services.oracle_service import MentorOracle
from mentormate.services.realtime_hub import RealtimeHub
from mentormate.utils.http_utils import ensure_found
from mentormate.utils.prompt_templates import PromptContext, PromptSessionType

logger = logging.getLogger(__name__)


@dataclass
class ChatExchange:
    user_message: Any
    mentor_message: Any
    is_fallback: bool


def start_session(gateway: DataStoreGateway, user_id: str, mentor_id: str,
                  session_type: SessionType = SessionType.text):
    ensure_found(*gateway.get_profile(user_id), what="user profile")
    ensure_found(*gateway.get_mentor(mentor_id), what="mentor")

    session, error = gateway.create_chat_session(user_id, mentor_id, session_type=session_type)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not start chat session")
    logger.info("💬 Chat session %s started for user %s", session.id, user_id)
    return session


def _publish(hub: Optional[RealtimeHub], message) -> None:
    if hub is not None and message is not None:
        hub.publish(message.to_dict())


def send_message(gateway: DataStoreGateway, oracle: MentorOracle, session_id: str, content: str,
                 hub: Optional[RealtimeHub] = None, external_data=None) -> ChatExchange:
    """Store the user's message, ask the mentor, store and publish both."""
    session = ensure_found(*gateway.get_chat_session(session_id), what="chat session")
    if session.status == SessionStatus.ended:
        raise HTTPException(status_code=409, detail="Chat session has ended")

    mentor = ensure_found(*gateway.get_mentor(session.mentor_id), what="mentor")
    user, _ = gateway.get_profile(session.user_id)

    history_rows, error = gateway.list_chat_messages(session_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load conversation")
    history = [
        {"sender_type": m.sender_type.value, "content": m.content}
        for m in history_rows
    ]

    user_message, error = gateway.create_chat_message(
        session_id=session_id, sender_type=SenderType.user, content=content,
    )
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not save message")
    _publish(hub, user_message)

    reply = generate_mentor_reply(
        oracle, mentor, content,
        context=PromptContext(
            conversation_history=history,
            user_name=getattr(user, "full_name", None),
        ),
        session_type=PromptSessionType.chat,
        external_data=external_data,
    )

    mentor_message, error = gateway.create_chat_message(
        session_id=session_id,
        sender_type=SenderType.mentor,
        message_type=MessageType.text,
        content=reply.response,
        metadata={
            "ai_generated": not reply.is_fallback,
            "model": reply.metadata.get("model"),
            "is_fallback": reply.is_fallback,
        },
    )
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not save mentor reply")
    _publish(hub, mentor_message)

    return ChatExchange(user_message=user_message, mentor_message=mentor_message, is_fallback=reply.is_fallback)


def end_session(gateway: DataStoreGateway, session_id: str):
    session, error = gateway.end_chat_session(session_id)
    session = ensure_found(session, error, what="chat session")
    logger.info("🛑 Chat session %s ended after %ss", session_id, session.duration_seconds)
    return session
