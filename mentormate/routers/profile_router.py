# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError

from mentormate.schemas.profile_schemas import (
    OnboardingRequest, ProfileCreateRequest, ProfileOut, ProfileUpdateRequest
)
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.dependencies import get_gateway
from mentormate.utils.http_utils import ensure_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.post("", response_model=ProfileOut, status_code=201)
def create_profile(payload: ProfileCreateRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    profile, error = gateway.create_profile(payload.email, payload.full_name)
    if isinstance(error, IntegrityError):
        raise HTTPException(status_code=409, detail="A profile with this email already exists")
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not create profile")
    return profile


@router.get("/{user_id}", response_model=ProfileOut)
def get_profile(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    return ensure_found(*gateway.get_profile(user_id), what="user profile")


@router.patch("/{user_id}", response_model=ProfileOut)
def update_profile(user_id: str, payload: ProfileUpdateRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    updates = payload.model_dump(exclude_unset=True)
    if updates.get("default_mentor_id"):
        ensure_found(*gateway.get_mentor(updates["default_mentor_id"]), what="mentor")
    return ensure_found(*gateway.update_profile(user_id, updates), what="user profile")


@router.post("/{user_id}/onboarding", response_model=ProfileOut)
def complete_onboarding(user_id: str, payload: OnboardingRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    """Pick the default mentor, store the first goals and flag the profile as onboarded."""
    ensure_found(*gateway.get_profile(user_id), what="user profile")
    ensure_found(*gateway.get_mentor(payload.mentor_id), what="mentor")

    texts = [t.strip() for t in payload.goals if t and t.strip()]
    if texts:
        _, error = gateway.create_goals(user_id, texts)
        if error is not None:
            raise HTTPException(status_code=500, detail="Could not save goals")

    profile = ensure_found(
        *gateway.complete_onboarding(user_id, payload.mentor_id, payload.preferred_mode),
        what="user profile",
    )
    logger.info("🎉 User %s finished onboarding with mentor %s", user_id, payload.mentor_id)
    return profile
