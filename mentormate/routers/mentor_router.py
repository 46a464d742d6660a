# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from mentormate.models.mentor import MentorCategory
from mentormate.schemas.mentor_schemas import CustomMentorRequest, MentorOut
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.dependencies import get_gateway
from mentormate.utils.http_utils import ensure_found

router = APIRouter(prefix="/mentors", tags=["Mentors"])


@router.get("", response_model=List[MentorOut])
def list_mentors(category: Optional[MentorCategory] = None, gateway: DataStoreGateway = Depends(get_gateway)):
    if category is not None:
        mentors, error = gateway.mentors_by_category(category)
    else:
        mentors, error = gateway.list_mentors()
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load mentors")
    return mentors


@router.get("/custom", response_model=List[MentorOut])
def list_custom_mentors(user_id: Optional[str] = None, gateway: DataStoreGateway = Depends(get_gateway)):
    mentors, error = gateway.list_custom_mentors(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load mentors")
    return mentors


@router.post("/custom", response_model=MentorOut, status_code=201)
def create_custom_mentor(payload: CustomMentorRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    ensure_found(*gateway.get_profile(payload.user_id), what="user profile")

    fields = payload.model_dump(exclude={"user_id"})
    mentor, error = gateway.create_mentor(
        category=MentorCategory.custom,
        is_custom=True,
        created_by=payload.user_id,
        tone=(payload.response_style or {}).get("tone", "supportive"),
        **fields,
    )
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not create mentor")
    return mentor


@router.get("/slug/{slug}", response_model=MentorOut)
def get_mentor_by_slug(slug: str, gateway: DataStoreGateway = Depends(get_gateway)):
    return ensure_found(*gateway.get_mentor_by_slug(slug), what="mentor")


@router.get("/{mentor_id}", response_model=MentorOut)
def get_mentor(mentor_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    return ensure_found(*gateway.get_mentor(mentor_id), what="mentor")
