# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging

from fastapi import APIRouter, Request
from sqlalchemy import text

from mentormate.services.oracle_service import DisabledOracle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Infra"])


@router.get("/healthz")
def health_check(request: Request):
    state = request.app.state
    result = {
        "db_connection": False,
        "oracle_configured": not isinstance(state.oracle, DisabledOracle),
        "tavus_configured": not state.tavus.is_mock,
    }

    db = state.session_factory()
    try:
        db.execute(text("SELECT 1"))
        result["db_connection"] = True
    except Exception as e:
        logger.error("❌ Health check DB query failed: %s", e)
        return {"status": "error", "error": "database unavailable", "details": result}
    finally:
        db.close()

    return {
        "status": "ok" if all(result.values()) else "partial",
        "details": result,
    }
