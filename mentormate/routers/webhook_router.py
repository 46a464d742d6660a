# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from mentormate.schemas.webhook_schemas import TavusWebhookEvent
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.tavus_service import handle_webhook_event
from mentormate.utils.dependencies import get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.post("/tavus")
async def tavus_webhook(request: Request, gateway: DataStoreGateway = Depends(get_gateway)):
    raw = await request.body()
    try:
        event = TavusWebhookEvent.model_validate(json.loads(raw or b"null"))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning("⚠️ Rejected malformed Tavus webhook: %s", e)
        raise HTTPException(status_code=400, detail="Malformed webhook payload")

    logger.info("📨 Tavus webhook received: %s", event.event_type)
    outcome = handle_webhook_event(gateway, event.event_type, event.data)
    return {"success": True, "event_type": event.event_type, "outcome": outcome}
