# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Static in-persona text used whenever the text-generation service is
unavailable. Tables are keyed by the mentor's stable slug, never by its
display name.
"""

import enum
import random
from typing import Dict, List, Optional


class MentorKey(str, enum.Enum):
    zenkai = "zenkai"
    coach_lex = "coach_lex"
    prof_ada = "prof_ada"
    no_bs_tony = "no_bs_tony"


def resolve_mentor_key(slug: Optional[str]) -> Optional[MentorKey]:
    if not slug:
        return None
    try:
        return MentorKey(slug)
    except ValueError:
        return None


GENERIC_SUPPORTIVE_MESSAGE = "Keep up the great work! I'm here to support you on your journey."

# -------------------------------
# Nudges (mentor x pattern)
# -------------------------------

NUDGE_FALLBACKS: Dict[MentorKey, Dict[str, str]] = {
    MentorKey.zenkai: {
        "missed_checkins": "Hello, I've noticed you haven't checked in lately. Remember, there's no judgment here - just gentle encouragement to reconnect with your journey. When you're ready, I'll be here to support you with mindful guidance.",
        "low_mood": "I sense you've been having some challenging days recently. Please remember that difficult emotions are part of the human experience. Take a deep breath, be kind to yourself, and know that this too shall pass.",
        "goal_struggle": "It seems your goals might need some adjustment. This isn't failure - it's wisdom. Sometimes we need to adapt our path to honor where we are right now. Let's explore what truly serves you.",
        "celebration": "I'm sensing beautiful energy from your recent check-ins! Your consistency and positive mood are inspiring. Keep nurturing this momentum with gentle awareness and self-compassion.",
    },
    MentorKey.coach_lex: {
        "missed_checkins": "Hey champion! 💪 I noticed you've been MIA from our check-ins. No worries - even the strongest athletes need rest days! But let's get back in there and show your goals who's boss! Ready to crush it?",
        "low_mood": "I can see you've been having some tough days, but remember - that's when champions are made! Every setback is a setup for a comeback. Let's channel that energy into movement and momentum! 🔥",
        "goal_struggle": "Listen, goal struggles are just part of the game! Even elite athletes adjust their training. Let's reassess, refocus, and come back stronger. You've got this - I believe in you 100%!",
        "celebration": "YESSS! 🙌 Look at you absolutely CRUSHING it! Your positive energy and consistency are off the charts! Keep this momentum going - you're in beast mode and I'm here for it!",
    },
    MentorKey.prof_ada: {
        "missed_checkins": "I've observed a gap in your check-in pattern. Consistency is key to building sustainable habits. Consider scheduling a specific time for daily reflection - this creates a systematic approach to accountability.",
        "low_mood": "Your recent mood data suggests you're experiencing a challenging period. Research shows that structured activities and goal-setting can help. Let's analyze what factors might be contributing and develop a strategic response.",
        "goal_struggle": "Your goal completion metrics indicate room for optimization. This is valuable data! Let's reassess your objectives using SMART criteria and adjust your approach based on what the evidence shows.",
        "celebration": "Excellent work! Your consistent positive metrics demonstrate the power of systematic habit building. This upward trend validates your approach - let's analyze what's working and replicate it.",
    },
    MentorKey.no_bs_tony: {
        "missed_checkins": "Alright, enough excuses. You've been radio silent for days. I get it - life happens. But successful people show up even when they don't feel like it. Time to get back in there and do the work.",
        "low_mood": "Look, low moods happen to everyone. But you can't let them control your trajectory. Stop wallowing and start acting. Take one small step forward today. Action creates momentum, not feelings.",
        "goal_struggle": "Your goal completion rate is telling me you're either overcommitting or underperforming. Time for some real talk: What are you actually going to DO differently? No more excuses, just results.",
        "celebration": "Now THIS is what I'm talking about! You're proving that consistency pays off. Don't get comfortable though - this is your new baseline. Keep pushing and raise that bar even higher.",
    },
}

# Used for custom mentors and any slug missing from NUDGE_FALLBACKS
GENERIC_NUDGE_FALLBACKS: Dict[str, str] = {
    "missed_checkins": "It's been a few days since your last check-in. No pressure - whenever you're ready, a quick check-in is a great way to reconnect with your goals. I'm here when you are.",
    "low_mood": "It looks like the last few days have been heavy. Be gentle with yourself. One small, kind thing for yourself today is enough, and I'm here if you want to talk it through.",
    "goal_struggle": "Your goals have been tough to hit lately, and that's useful information, not a failure. Let's make one of them a little smaller this week and build from there.",
    "celebration": "Your recent check-ins have been fantastic! Take a moment to notice what's working - you've earned it. Let's keep that momentum going.",
}


def nudge_fallback(slug: Optional[str], pattern_type: str) -> str:
    """Mentor table, then pattern-only table, then the generic supportive line."""
    key = resolve_mentor_key(slug)
    if key is not None:
        message = NUDGE_FALLBACKS.get(key, {}).get(pattern_type)
        if message:
            return message
    return GENERIC_NUDGE_FALLBACKS.get(pattern_type) or GENERIC_SUPPORTIVE_MESSAGE


# -------------------------------
# Chat / check-in replies
# -------------------------------

REPLY_FALLBACKS: Dict[MentorKey, List[str]] = {
    MentorKey.zenkai: [
        "Thank you for sharing that with me. Take a deep breath and remember that every moment is a new beginning. How are you feeling right now?",
        "I appreciate your openness. Let's approach this with mindfulness and compassion. What would bring you peace in this moment?",
        "Your awareness is beautiful. Remember, progress isn't about perfection - it's about presence. What intention would you like to set?",
    ],
    MentorKey.coach_lex: [
        "That's the spirit! I love hearing about your journey. You're building real momentum here! What's your next challenge? 💪",
        "YES! You're showing up and that's what matters! Keep that energy flowing. How can we level up your game today?",
        "Amazing work! Every step forward counts, no matter how small. What victory are we celebrating next?",
    ],
    MentorKey.prof_ada: [
        "Excellent insight! Let's analyze this systematically. I can see you're thinking critically about your approach. What patterns do you notice?",
        "That's valuable data you've shared. Let's break this down into actionable components. What's the next logical step in your strategy?",
        "Great observation! Your analytical thinking is improving. How does this connect to your larger learning objectives?",
    ],
    MentorKey.no_bs_tony: [
        "Alright, let's cut to the chase. I hear what you're saying, but what specific action are you going to take about it?",
        "Good. Now stop thinking and start doing. What's your concrete next step and when are you going to execute it?",
        "I appreciate the honesty. Results speak louder than words. What measurable outcome are you committing to this week?",
    ],
}

GENERIC_REPLY_FALLBACKS: List[str] = [
    "Thank you for sharing that. I'm here to support you on your journey. How can I help you move forward?",
    "I hear you, and I appreciate your commitment to growth. What's one thing you can do right now to progress?",
    "That's valuable insight. Let's focus on what you can control and take meaningful action.",
]


def reply_fallback(slug: Optional[str], rng: Optional[random.Random] = None) -> str:
    key = resolve_mentor_key(slug)
    options = REPLY_FALLBACKS.get(key, GENERIC_REPLY_FALLBACKS) if key else GENERIC_REPLY_FALLBACKS
    return (rng or random).choice(options)
