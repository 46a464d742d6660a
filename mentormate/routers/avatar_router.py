# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from mentormate.schemas.avatar_schemas import CustomAvatarOut
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.tavus_service import TavusError, register_custom_avatar
from mentormate.utils.dependencies import get_gateway, get_tavus
from mentormate.utils.http_utils import ensure_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/avatars", tags=["Avatars"])

MAX_VIDEO_BYTES = 200 * 1024 * 1024


@router.post("", response_model=CustomAvatarOut, status_code=201)
async def create_avatar(
    user_id: str = Form(...),
    name: str = Form(..., min_length=1, max_length=100),
    video: UploadFile = File(...),
    gateway: DataStoreGateway = Depends(get_gateway),
    tavus=Depends(get_tavus),
):
    """
    Upload a training video for a personal mentor avatar. The avatar starts
    in `training`; the Tavus `avatar.ready` / `avatar.error` webhook settles it.
    """
    ensure_found(*gateway.get_profile(user_id), what="user profile")

    if video.content_type and not video.content_type.startswith("video/"):
        raise HTTPException(status_code=400, detail="Training file must be a video")
    content = await video.read()
    if not content:
        raise HTTPException(status_code=400, detail="Training video is empty")
    if len(content) > MAX_VIDEO_BYTES:
        raise HTTPException(status_code=413, detail="Training video is too large")

    try:
        avatar, error = register_custom_avatar(
            gateway, tavus, user_id, name, content,
            filename=video.filename or "training.mp4",
            content_type=video.content_type or "video/mp4",
        )
    except TavusError as e:
        logger.error("❌ Avatar creation failed for user %s: %s", user_id, e)
        raise HTTPException(status_code=502, detail="Avatar service unavailable")
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not save avatar")
    return avatar


@router.get("", response_model=List[CustomAvatarOut])
def list_avatars(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    avatars, error = gateway.list_custom_avatars(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load avatars")
    return avatars
