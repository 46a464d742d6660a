# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Any, Dict, Optional

from pydantic import BaseModel


class TavusWebhookEvent(BaseModel):
    event_type: str
    data: Dict[str, Any] = {}
    timestamp: Optional[str] = None
