# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime
from typing import Optional

from mentormate.models.chat import ChatMessage, MessageType, SenderType, SessionType
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.message_generator import ProactiveMessage
from mentormate.services.realtime_hub import RealtimeHub

logger = logging.getLogger(__name__)


class NudgeDispatchError(RuntimeError):
    pass


class NudgeDispatcher:
    """
    Writes a proactive message into the user's chat history.

    Reuses today's active session for the (user, mentor) pair when there is
    one. The lookup-then-create is not transactional, so two concurrent runs
    can each open a session; the most recent one wins on later lookups.
    """

    def __init__(self, gateway: DataStoreGateway, hub: Optional[RealtimeHub] = None):
        self.gateway = gateway
        self.hub = hub

    def dispatch(self, message: ProactiveMessage, now: Optional[datetime] = None) -> ChatMessage:
        session, error = self.gateway.find_active_session_today(message.user_id, message.mentor_id, now=now)
        if error is not None:
            raise NudgeDispatchError(f"Session lookup failed: {error}")

        if session is None:
            session, error = self.gateway.create_chat_session(
                message.user_id, message.mentor_id, session_type=SessionType.text
            )
            if error is not None or session is None:
                raise NudgeDispatchError(f"Session creation failed: {error}")
            logger.info("💬 Opened nudge session %s for user %s", session.id, message.user_id)

        metadata = dict(message.metadata or {})
        metadata.update({"proactive": True, "message_category": message.message_type})

        chat_message, error = self.gateway.create_chat_message(
            session_id=session.id,
            sender_type=SenderType.mentor,
            message_type=MessageType.text,
            content=message.content,
            metadata=metadata,
        )
        if error is not None or chat_message is None:
            raise NudgeDispatchError(f"Message insert failed: {error}")

        if self.hub is not None:
            self.hub.publish(chat_message.to_dict())

        logger.info("[IN-CHAT] %s for user %s", message.message_type, message.user_id)
        return chat_message
