# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GoalCreateRequest(BaseModel):
    user_id: str
    text: str = Field(min_length=1)


class GoalBulkCreateRequest(BaseModel):
    user_id: str
    texts: List[str] = Field(min_length=1)


class GoalUpdateRequest(BaseModel):
    text: Optional[str] = None
    is_active: Optional[bool] = None


class GoalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    text: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
