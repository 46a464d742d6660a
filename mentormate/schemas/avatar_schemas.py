# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from mentormate.models.avatar import AvatarStatus


class CustomAvatarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    tavus_avatar_id: Optional[str] = None
    status: AvatarStatus
    avatar_type: Optional[str] = None
    configuration: Optional[Dict[str, Any]] = None
    created_at: datetime
