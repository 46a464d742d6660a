# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mentormate.models.mentor import MentorCategory


class CustomMentorRequest(BaseModel):
    user_id: str
    name: str = Field(min_length=1)
    description: str = ""
    personality: Optional[str] = None
    speaking_style: Optional[str] = None
    motivation_approach: Optional[str] = None
    prompt_template: Optional[str] = None
    response_style: Optional[Dict[str, Any]] = None
    expertise: List[str] = []
    tavus_avatar_id: Optional[str] = None


class MentorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: Optional[str] = None
    name: str
    category: MentorCategory
    tone: Optional[str] = None
    description: Optional[str] = None
    personality: Optional[str] = None
    speaking_style: Optional[str] = None
    motivation_approach: Optional[str] = None
    response_style: Optional[Dict[str, Any]] = None
    expertise: Optional[List[str]] = None
    is_custom: bool
    created_by: Optional[str] = None
    tavus_avatar_id: Optional[str] = None
