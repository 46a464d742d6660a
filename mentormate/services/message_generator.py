# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from mentormate.services.oracle_service import MentorOracle, OracleError
from mentormate.services.pattern_analyzer import Pattern, PatternType
from mentormate.utils.fallback_messages import GENERIC_SUPPORTIVE_MESSAGE, nudge_fallback
from mentormate.utils.prompt_templates import (
    MentorPersona, PromptContext, PromptSessionType, build_oracle_messages, nudge_user_message
)
from mentormate.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

NUDGE_MAX_TOKENS = 200
NUDGE_TEMPERATURE = 0.7


@dataclass
class ProactiveMessage:
    user_id: str
    mentor_id: str
    message_type: str  # 'nudge' | 'celebration'
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def message_category(pattern_type: str) -> str:
    return "celebration" if pattern_type == PatternType.celebration.value else "nudge"


class MessageGenerator:
    def __init__(self, oracle: MentorOracle, external_data=None):
        self.oracle = oracle
        self.external_data = external_data

    def generate(self, pattern: Pattern, mentor, user) -> ProactiveMessage:
        """
        Turn a detected pattern into a mentor-voiced message.

        Falls back to the static tables on any oracle failure; never raises
        and never returns empty content.
        """
        persona = MentorPersona.from_mentor(mentor)
        user_id = getattr(user, "id", None)
        user_name = getattr(user, "full_name", None)

        content: Optional[str] = None
        ai_generated = False
        try:
            context = PromptContext(
                user_name=user_name,
                pattern_type=pattern.type,
                pattern_data=dict(pattern.data or {}),
            )
            messages = build_oracle_messages(
                persona, nudge_user_message(pattern.type, user_name), context, PromptSessionType.nudge
            )
            if self.external_data is not None:
                note = self.external_data.nudge_context(pattern.type)
                if note:
                    messages[0]["content"] += f"\n\nOutside context you may weave in: {note}"
            completion = self.oracle.complete(messages, max_tokens=NUDGE_MAX_TOKENS, temperature=NUDGE_TEMPERATURE)
            content = (completion.text or "").strip() or None
            ai_generated = content is not None
        except OracleError as e:
            logger.warning("⚠️ Oracle failed for %s nudge (user %s): %s", pattern.type, user_id, e)
        except Exception as e:
            logger.exception("❌ Unexpected error generating %s nudge for user %s: %s", pattern.type, user_id, e)

        metadata: Dict[str, Any] = {
            "pattern_type": pattern.type,
            "pattern_data": dict(pattern.data or {}),
            "ai_generated": ai_generated,
            "timestamp": utcnow().isoformat(),
        }
        if not ai_generated:
            content = self.fallback_text(persona.slug, pattern.type)
            metadata["fallback"] = True

        return ProactiveMessage(
            user_id=user_id,
            mentor_id=persona.id,
            message_type=message_category(pattern.type),
            content=content,
            metadata=metadata,
        )

    @staticmethod
    def fallback_text(slug: Optional[str], pattern_type: str) -> str:
        try:
            return nudge_fallback(slug, pattern_type)
        except Exception:
            logger.exception("❌ Fallback lookup failed for slug=%s pattern=%s", slug, pattern_type)
            return GENERIC_SUPPORTIVE_MESSAGE
