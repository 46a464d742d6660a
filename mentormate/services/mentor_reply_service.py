# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mentormate.services.oracle_service import MentorOracle, OracleError
from mentormate.utils.fallback_messages import reply_fallback
from mentormate.utils.prompt_templates import (
    MentorPersona, PromptContext, PromptSessionType, build_oracle_messages
)

logger = logging.getLogger(__name__)

CHAT_MAX_TOKENS = 200
DEFAULT_MAX_TOKENS = 300
REPLY_TEMPERATURE = 0.7


@dataclass
class MentorReply:
    response: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        return bool(self.metadata.get("is_fallback"))


def generate_mentor_reply(oracle: MentorOracle, mentor, user_message: str,
                          context: Optional[PromptContext] = None,
                          session_type=PromptSessionType.chat,
                          rng: Optional[random.Random] = None,
                          external_data=None) -> MentorReply:
    """
    In-persona reply for chat, check-in and conversation sessions.
    On any oracle failure a pre-written reply for the mentor is substituted.
    With ``external_data`` the system prompt gains category-specific context.
    """
    persona = MentorPersona.from_mentor(mentor)
    session_value = getattr(session_type, "value", session_type)
    max_tokens = CHAT_MAX_TOKENS if session_value == PromptSessionType.chat.value else DEFAULT_MAX_TOKENS

    try:
        messages = build_oracle_messages(persona, user_message, context, session_type)
        if external_data is not None:
            messages[0]["content"] = external_data.enhance_mentor_prompt(messages[0]["content"], persona.category)
        completion = oracle.complete(messages, max_tokens=max_tokens, temperature=REPLY_TEMPERATURE)
        text = (completion.text or "").strip()
        if not text:
            raise OracleError("Completion contained no text")
        return MentorReply(
            response=text,
            metadata={
                "model": completion.model,
                "prompt_tokens": completion.usage.get("prompt_tokens"),
                "completion_tokens": completion.usage.get("completion_tokens"),
                "total_tokens": completion.usage.get("total_tokens"),
                "mentor_name": persona.name,
                "session_type": session_value,
            },
        )
    except OracleError as e:
        error = str(e)
        logger.warning("⚠️ Mentor reply fell back for %s (%s): %s", persona.name, session_value, e)
    except Exception as e:
        error = "Unexpected error"
        logger.exception("❌ Unexpected error generating reply for %s: %s", persona.name, e)

    return MentorReply(
        response=reply_fallback(persona.slug, rng=rng),
        metadata={
            "model": "fallback",
            "mentor_name": persona.name,
            "session_type": session_value,
            "is_fallback": True,
            "error": error,
        },
    )
