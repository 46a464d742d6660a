# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from .mentor import Mentor, MentorCategory
from .user_profile import UserProfile, InteractionMode
from .goal import Goal
from .checkin import Checkin
from .mentor_response import MentorResponse
from .chat import ChatSession, ChatMessage, SessionType, SessionStatus, SenderType, MessageType
from .avatar import CustomAvatar, VideoGeneration, AvatarStatus, VideoStatus
