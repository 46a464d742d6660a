# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

DEFAULT_CHAT_RATE = "30/minute"

# Installed by create_app from Settings.chat_rate_limit
_chat_rate = DEFAULT_CHAT_RATE


def configure_chat_limit(rate: str) -> None:
    global _chat_rate
    _chat_rate = rate or DEFAULT_CHAT_RATE


def get_chat_limit() -> str:
    return _chat_rate
