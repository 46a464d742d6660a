# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from mentormate.schemas.checkin_schemas import (
    CheckinOut, CheckinRequest, CheckinResponse, MentorResponseOut, WeeklyStats
)
from mentormate.services.checkin_service import submit_checkin
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.dependencies import get_gateway, get_oracle, get_prompt_context_source, get_tavus
from mentormate.utils.http_utils import ensure_found
from mentormate.utils.rate_limit_utils import get_chat_limit, limiter

router = APIRouter(prefix="/checkins", tags=["Check-ins"])


@router.post("", response_model=CheckinResponse, status_code=201)
@limiter.limit(get_chat_limit)
def create_checkin(
    request: Request,
    payload: CheckinRequest,
    gateway: DataStoreGateway = Depends(get_gateway),
    oracle=Depends(get_oracle),
    tavus=Depends(get_tavus),
    external_data=Depends(get_prompt_context_source),
):
    result = submit_checkin(
        gateway, oracle,
        user_id=payload.user_id,
        mentor_id=payload.mentor_id,
        mood_score=payload.mood_score,
        reflection=payload.reflection,
        goal_status=[g.model_dump() for g in payload.goal_status],
        mode=payload.mode,
        emotion_score=payload.emotion_score,
        tavus=tavus,
        external_data=external_data,
    )
    return {
        "checkin": CheckinOut.model_validate(result.checkin),
        "mentor_response": result.response_text,
        "mentor_response_id": getattr(result.mentor_response, "id", None),
        "streak": result.streak,
        "is_fallback": result.is_fallback,
        "video_job_id": getattr(result.video_job, "tavus_request_id", None),
    }


@router.get("", response_model=List[CheckinOut])
def list_checkins(user_id: str, mentor_id: Optional[str] = None, limit: int = Query(20, ge=1, le=100),
                  gateway: DataStoreGateway = Depends(get_gateway)):
    if mentor_id:
        checkins, error = gateway.list_checkins_by_mentor(user_id, mentor_id, limit=limit)
    else:
        checkins, error = gateway.recent_checkins(user_id, limit=limit)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load check-ins")
    return checkins


@router.get("/streak")
def get_streak(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    streak, error = gateway.checkin_streak(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not compute streak")
    return {"user_id": user_id, "streak": streak}


@router.get("/weekly-stats", response_model=WeeklyStats)
def get_weekly_stats(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    stats, error = gateway.weekly_stats(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not compute weekly stats")
    return stats


@router.get("/mentor-responses", response_model=List[MentorResponseOut])
def list_mentor_responses(user_id: str, limit: int = Query(20, ge=1, le=100),
                          gateway: DataStoreGateway = Depends(get_gateway)):
    responses, error = gateway.list_mentor_responses(user_id, limit=limit)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load mentor responses")
    return responses


@router.get("/{checkin_id}")
def get_checkin(checkin_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    checkin = ensure_found(*gateway.get_checkin(checkin_id), what="check-in")
    response, _ = gateway.get_mentor_response_for_checkin(checkin_id)
    return {
        "checkin": CheckinOut.model_validate(checkin),
        "mentor_response": response.response_text if response else None,
        "video_url": response.video_url if response else None,
    }
