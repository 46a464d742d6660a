# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
System-prompt assembly shared by check-in replies, chat replies and nudges.

Sections are always emitted in this order:
  1. base persona template
  2. identity, personality, speaking style and motivation approach
  3. response-style guidance
  4. category focus
  5. situational context
  6. length/style directive for the session type
"""

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

DEFAULT_TEMPLATE = "You are a supportive AI mentor. Respond helpfully and in character."

CHAT_HISTORY_LIMIT = 10
CONTEXT_HISTORY_LIMIT = 5


class PromptSessionType(str, enum.Enum):
    chat = "chat"
    checkin = "checkin"
    conversation = "conversation"
    nudge = "nudge"


CATEGORY_GUIDANCE = {
    "fitness": "Focus on physical health, movement, and energy.",
    "wellness": "Emphasize mental well-being, mindfulness, and balance.",
    "study": "Support learning, productivity, and academic goals.",
    "career": "Address professional growth and achievement.",
}
GENERAL_GUIDANCE = "Provide general encouragement and support."

STYLE_DEFAULTS = {
    "tone": "supportive",
    "emoji_use": "moderate",
    "encouragement_level": "medium",
    "challenge_level": "medium",
}

PATTERN_INSTRUCTIONS = {
    "missed_checkins": "The user hasn't checked in for {days_missed} days. Gently encourage them to reconnect "
                       "without making them feel guilty.",
    "low_mood": "The user has been experiencing lower mood scores (avg: {avg_mood:.1f}/10). Offer empathetic "
                "support and practical suggestions.",
    "goal_struggle": "The user's goal completion rate is {completion_rate:.0f}%. Provide encouraging guidance on "
                     "goal adjustment or strategy.",
    "celebration": "The user has been doing great (avg mood: {avg_mood:.1f}/10)! Celebrate their success and "
                   "encourage continued momentum.",
}
GENERIC_PATTERN_INSTRUCTION = "Send a general supportive message."


@dataclass
class MentorPersona:
    name: str
    category: str
    id: Optional[str] = None
    slug: Optional[str] = None
    personality: Optional[str] = None
    speaking_style: Optional[str] = None
    motivation_approach: Optional[str] = None
    prompt_template: Optional[str] = None
    response_style: Optional[Dict[str, Any]] = None

    @classmethod
    def from_mentor(cls, mentor) -> "MentorPersona":
        """Accepts a Mentor row or any object/dict with the same field names."""
        if isinstance(mentor, MentorPersona):
            return mentor
        get = mentor.get if isinstance(mentor, dict) else lambda key, default=None: getattr(mentor, key, default)
        category = get("category", "custom")
        category = getattr(category, "value", category) or "custom"
        return cls(
            id=get("id"),
            slug=get("slug"),
            name=get("name") or "Your mentor",
            category=str(category),
            personality=get("personality"),
            speaking_style=get("speaking_style"),
            motivation_approach=get("motivation_approach"),
            prompt_template=get("prompt_template"),
            response_style=get("response_style"),
        )


@dataclass
class PromptContext:
    mood_score: Optional[int] = None
    goals: List[Dict[str, Any]] = field(default_factory=list)
    reflection: Optional[str] = None
    streak: Optional[int] = None
    conversation_history: List[Dict[str, Any]] = field(default_factory=list)
    user_name: Optional[str] = None
    pattern_type: Optional[str] = None
    pattern_data: Dict[str, Any] = field(default_factory=dict)


def _session_value(session_type) -> str:
    return getattr(session_type, "value", session_type) or ""


def category_guidance(category: str) -> str:
    return CATEGORY_GUIDANCE.get((category or "").lower(), GENERAL_GUIDANCE)


def recent_history(history: Sequence[Dict[str, Any]], session_type) -> List[Dict[str, Any]]:
    """Newest N messages, kept oldest-first."""
    limit = CHAT_HISTORY_LIMIT if _session_value(session_type) == PromptSessionType.chat.value else CONTEXT_HISTORY_LIMIT
    if not history:
        return []
    return list(history)[-limit:]


def pattern_instruction(pattern_type: Optional[str], data: Dict[str, Any]) -> str:
    template = PATTERN_INSTRUCTIONS.get(pattern_type or "")
    if template is None:
        return GENERIC_PATTERN_INSTRUCTION
    values = {"days_missed": 3, "avg_mood": 0.0, "completion_rate": 0.0}
    values.update(data or {})
    try:
        return template.format(**values)
    except (TypeError, ValueError):
        return GENERIC_PATTERN_INSTRUCTION


def _persona_section(persona: MentorPersona) -> str:
    return (
        f"\n\nYour Name: {persona.name}"
        f"\nYour Category: {persona.category}"
        f"\nYour Personality: {persona.personality or 'supportive and encouraging'}"
        f"\nYour Speaking Style: {persona.speaking_style or 'conversational and helpful'}"
        f"\nYour Motivation Approach: {persona.motivation_approach or 'balanced support and challenge'}"
    )


def _style_section(persona: MentorPersona) -> str:
    style = dict(STYLE_DEFAULTS)
    for key, value in (persona.response_style or {}).items():
        if key in style and value:
            style[key] = value
    return (
        "\n\nResponse Guidelines:"
        f"\n- Tone: {style['tone']}"
        f"\n- Emoji use: {style['emoji_use']}"
        f"\n- Encouragement level: {style['encouragement_level']}"
        f"\n- Challenge level: {style['challenge_level']}"
    )


def _checkin_context(context: PromptContext) -> str:
    lines = ["\n\nUser Context for this check-in:"]
    if context.mood_score:
        lines.append(f"- Current mood: {context.mood_score}/10")
    if context.goals:
        completed = sum(1 for g in context.goals if g.get("completed"))
        lines.append(f"- Goals completed: {completed}/{len(context.goals)}")
        for goal in context.goals:
            status = "completed" if goal.get("completed") else "not completed"
            line = f"- Goal: {goal.get('goal_text', '')} ({status})"
            if goal.get("notes"):
                line += f" (Note: {goal['notes']})"
            lines.append(line)
    if context.reflection:
        lines.append(f'- User reflection: "{context.reflection}"')
    if context.streak and context.streak > 0:
        lines.append(f"- Current streak: {context.streak} days")
    return "\n".join(lines)


def _chat_context(context: PromptContext, session_type) -> str:
    history = recent_history(context.conversation_history, session_type)
    if not history:
        return "\n\nThis is the start of the conversation."
    return f"\n\nThe {len(history)} most recent messages of this conversation follow, oldest first."


def _nudge_context(context: PromptContext) -> str:
    return (
        f"\n\nUser: {context.user_name or 'User'}"
        f"\nPattern detected: {context.pattern_type}"
        f"\nPattern data: {json.dumps(context.pattern_data or {}, sort_keys=True, default=str)}"
    )


def _length_directive(session_type, context: PromptContext) -> str:
    value = _session_value(session_type)
    if value == PromptSessionType.chat.value:
        return "\n\nKeep responses conversational and under 150 words. Ask follow-up questions to engage the user."
    if value == PromptSessionType.checkin.value:
        return ("\n\nProvide thoughtful, personalized advice in 150-200 words. "
                "Focus on their progress and next steps.")
    if value == PromptSessionType.nudge.value:
        return (
            "\n\nGenerate a proactive, caring message that:"
            "\n1. Addresses the specific pattern in a supportive way"
            "\n2. Maintains your mentor personality"
            "\n3. Offers specific, actionable advice"
            "\n4. Is encouraging but not pushy"
            "\n5. Is under 150 words"
            "\n6. Feels personal and timely"
            f"\n\n{pattern_instruction(context.pattern_type, context.pattern_data)}"
        )
    return "\n\nRespond naturally and helpfully, keeping messages concise but meaningful."


def build_system_prompt(mentor, context: Optional[PromptContext] = None, session_type="chat") -> str:
    persona = MentorPersona.from_mentor(mentor)
    context = context or PromptContext()
    value = _session_value(session_type)

    prompt = persona.prompt_template or DEFAULT_TEMPLATE
    prompt += _persona_section(persona)
    prompt += _style_section(persona)
    prompt += f"\n\nFocus: {category_guidance(persona.category)}"

    if value == PromptSessionType.checkin.value:
        prompt += _checkin_context(context)
    elif value == PromptSessionType.nudge.value:
        prompt += _nudge_context(context)
    else:
        prompt += _chat_context(context, session_type)

    prompt += _length_directive(session_type, context)
    return prompt


def build_oracle_messages(mentor, user_message: str, context: Optional[PromptContext] = None,
                          session_type="chat") -> List[Dict[str, str]]:
    """System prompt, then the truncated history, then the current user message."""
    context = context or PromptContext()
    messages = [{"role": "system", "content": build_system_prompt(mentor, context, session_type)}]

    for msg in recent_history(context.conversation_history, session_type):
        role = "user" if msg.get("sender_type") == "user" else "assistant"
        content = msg.get("content") or ""
        if content:
            messages.append({"role": role, "content": content})

    messages.append({"role": "user", "content": user_message})
    return messages


def checkin_user_message(mood_score: int) -> str:
    return f"User completed a daily check-in with mood score {mood_score}/10, goals status, and reflection."


def nudge_user_message(pattern_type: str, user_name: Optional[str]) -> str:
    return f"Generate a proactive {pattern_type} message for {user_name or 'the user'}."
