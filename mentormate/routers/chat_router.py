# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from mentormate.schemas.chat_schemas import (
    ChatExchangeOut, ChatHistoryOut, ChatSessionOut, SendMessageRequest, StartSessionRequest
)
from mentormate.services import chat_service
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.dependencies import get_gateway, get_hub, get_oracle, get_prompt_context_source
from mentormate.utils.http_utils import ensure_found
from mentormate.utils.rate_limit_utils import get_chat_limit, limiter

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/sessions", response_model=ChatSessionOut, status_code=201)
def start_session(payload: StartSessionRequest, gateway: DataStoreGateway = Depends(get_gateway)):
    return chat_service.start_session(gateway, payload.user_id, payload.mentor_id, payload.session_type)


@router.get("/sessions", response_model=List[ChatSessionOut])
def list_sessions(user_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    sessions, error = gateway.list_chat_sessions(user_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load chat sessions")
    return sessions


@router.get("/sessions/{session_id}/messages", response_model=ChatHistoryOut)
def get_messages(session_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    ensure_found(*gateway.get_chat_session(session_id), what="chat session")
    messages, error = gateway.list_chat_messages(session_id)
    if error is not None:
        raise HTTPException(status_code=500, detail="Could not load messages")
    return {"session_id": session_id, "messages": [m.to_dict() for m in messages]}


@router.post("/sessions/{session_id}/messages", response_model=ChatExchangeOut)
@limiter.limit(get_chat_limit)
def send_message(
    request: Request,
    session_id: str,
    payload: SendMessageRequest,
    gateway: DataStoreGateway = Depends(get_gateway),
    oracle=Depends(get_oracle),
    hub=Depends(get_hub),
    external_data=Depends(get_prompt_context_source),
):
    exchange = chat_service.send_message(
        gateway, oracle, session_id, payload.content, hub=hub, external_data=external_data
    )
    return {
        "user_message": exchange.user_message.to_dict(),
        "mentor_message": exchange.mentor_message.to_dict(),
        "is_fallback": exchange.is_fallback,
    }


@router.post("/sessions/{session_id}/end", response_model=ChatSessionOut)
def end_session(session_id: str, gateway: DataStoreGateway = Depends(get_gateway)):
    return chat_service.end_session(gateway, session_id)
