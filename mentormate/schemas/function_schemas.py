# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from mentormate.services.external_data_service import ExternalDataType
from mentormate.utils.prompt_templates import PromptSessionType


class MentorFields(BaseModel):
    id: Optional[str] = None
    slug: Optional[str] = None
    name: str
    category: str = "custom"
    personality: Optional[str] = None
    speaking_style: Optional[str] = None
    motivation_approach: Optional[str] = None
    prompt_template: Optional[str] = None
    response_style: Optional[Dict[str, Any]] = None


class MentorContext(BaseModel):
    mood_score: Optional[int] = Field(default=None, ge=1, le=10)
    goals: List[Dict[str, Any]] = []
    reflection: Optional[str] = None
    streak: Optional[int] = None
    conversation_history: List[Dict[str, Any]] = []
    user_name: Optional[str] = None


class AIMentorRequest(BaseModel):
    mentor: MentorFields
    user_message: str
    context: Optional[MentorContext] = None
    session_type: PromptSessionType = PromptSessionType.chat


class AIMentorResponse(BaseModel):
    success: bool
    response: str
    metadata: Dict[str, Any]


class NudgeRunResponse(BaseModel):
    success: bool
    nudges_sent: int
    details: List[Dict[str, Any]]
    failed_users: List[str] = []
    error: Optional[str] = None


class ExternalDataRequest(BaseModel):
    data_type: ExternalDataType
    location: Optional[str] = None
    category: Optional[str] = None


class ExternalDataResponse(BaseModel):
    success: bool
    data: Dict[str, Any]
    source: str
    timestamp: str
