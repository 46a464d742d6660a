# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mentormate.schemas.function_schemas import (
    AIMentorRequest, AIMentorResponse, ExternalDataRequest, ExternalDataResponse, NudgeRunResponse,
)
from mentormate.services.mentor_reply_service import generate_mentor_reply
from mentormate.services.nudge_service import process_nudges
from mentormate.utils.dependencies import get_external_data, get_oracle, get_prompt_context_source
from mentormate.utils.prompt_templates import PromptContext
from mentormate.utils.rate_limit_utils import get_chat_limit, limiter
from mentormate.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Functions"])


@router.post("/proactive-nudges", response_model=NudgeRunResponse)
def run_proactive_nudges(request: Request, external_data=Depends(get_prompt_context_source)):
    """Run one nudge pass over every onboarded user."""
    state = request.app.state
    report = process_nudges(state.session_factory, state.oracle, hub=state.hub, external_data=external_data)
    if not report.success:
        return JSONResponse(status_code=500, content=report.to_dict())
    return report.to_dict()


@router.post("/ai-mentor", response_model=AIMentorResponse)
@limiter.limit(get_chat_limit)
def ai_mentor(request: Request, payload: AIMentorRequest, oracle=Depends(get_oracle),
              external_data=Depends(get_prompt_context_source)):
    context = PromptContext(**payload.context.model_dump()) if payload.context else None
    reply = generate_mentor_reply(
        oracle,
        payload.mentor.model_dump(),
        payload.user_message,
        context=context,
        session_type=payload.session_type,
        external_data=external_data,
    )
    return {"success": True, "response": reply.response, "metadata": reply.metadata}


@router.post("/external-data", response_model=ExternalDataResponse)
def external_data(payload: ExternalDataRequest, service=Depends(get_external_data)):
    data = service.fetch(payload.data_type, location=payload.location, category=payload.category)
    return {
        "success": True,
        "data": data,
        "source": payload.data_type.value,
        "timestamp": utcnow().isoformat(),
    }
