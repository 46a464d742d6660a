# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from mentormate.schemas.goal_schemas import GoalBulkCreateRequest, GoalCreateRequest, GoalOut, GoalUpdateRequest
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.dependencies import get_gateway
from mentormate.utils.http_utils import ensure_found

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.get("", response_model=List[GoalOut])
def list_goals(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    goals, error = gateway.list_active_goals(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load goals")
    return goals


@router.post("", response_model=GoalOut, status_code=201)
def create_goal(payload: GoalCreateRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    ensure_found(*gateway.get_profile(payload.user_id), what="user profile")
    goal, error = gateway.create_goal(payload.user_id, payload.text.strip())
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not create goal")
    return goal


@router.post("/bulk", response_model=List[GoalOut], status_code=201)
def create_goals(payload: GoalBulkCreateRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    ensure_found(*gateway.get_profile(payload.user_id), what="user profile")
    texts = [t.strip() for t in payload.texts if t.strip()]
    if not texts:
        raise HTTPException(status_code=400, detail="At least one non-empty goal is required")
    goals, error = gateway.create_goals(payload.user_id, texts)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not create goals")
    return goals


@router.patch("/{goal_id}", response_model=GoalOut)
def update_goal(goal_id: str, payload: GoalUpdateRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    return ensure_found(*gateway.update_goal(goal_id, payload.model_dump(exclude_unset=True)), what="goal")


@router.delete("/{goal_id}", response_model=GoalOut)
def delete_goal(goal_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    # Soft delete: past check-ins keep their goal text snapshots
    return ensure_found(*gateway.soft_delete_goal(goal_id), what="goal")
