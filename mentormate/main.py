# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pytz import timezone
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.engine import Engine

from mentormate.models.database import build_engine, build_session_factory, create_all_tables
from mentormate.routers import (
    avatar_router, chat_router, checkin_router, functions_router, goal_router, healthz_router,
    mentor_router, profile_router, stream_router, webhook_router,
)
from mentormate.services.external_data_service import ExternalDataService, build_external_data_service
from mentormate.services.mentor_seed import seed_builtin_mentors
from mentormate.services.nudge_service import process_nudges
from mentormate.services.oracle_service import MentorOracle, build_oracle
from mentormate.services.realtime_hub import RealtimeHub
from mentormate.services.tavus_service import TavusClient, build_tavus_client
from mentormate.utils.encryption import configure_encryption
from mentormate.utils.rate_limit_utils import configure_chat_limit, limiter
from mentormate.utils.settings import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def run_scheduled_nudges(app: FastAPI) -> None:
    state = app.state
    external_data = state.external_data if state.settings.external_context_enabled else None
    report = process_nudges(state.session_factory, state.oracle, hub=state.hub, external_data=external_data)
    if not report.success:
        logger.error("❌ Scheduled nudge run failed: %s", report.error)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None,
               oracle: Optional[MentorOracle] = None, tavus: Optional[TavusClient] = None,
               hub: Optional[RealtimeHub] = None,
               external_data: Optional[ExternalDataService] = None) -> FastAPI:
    """
    Build the API with every collaborator passed in or derived from settings.
    Configuration problems raise ConfigurationError before anything starts.
    """
    settings = settings or Settings.from_env()
    configure_encryption(settings.fernet_secret)

    engine = engine or build_engine(settings.database_url)
    # Create DB tables in one go
    create_all_tables(engine)
    session_factory = build_session_factory(engine)

    db = session_factory()
    try:
        seed_builtin_mentors(db)
    finally:
        db.close()

    scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 60})

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.nudge_scheduler_enabled:
            # 🗓️ Nudge pass on the configured hours
            scheduler.add_job(
                run_scheduled_nudges,
                trigger="cron",
                hour=settings.nudge_cron_hours,
                minute=0,
                timezone=timezone(settings.scheduler_timezone),
                args=[app],
                id="proactive_nudges",
                replace_existing=True,
            )
            scheduler.start()
            logger.info("⏰ Nudge scheduler started (%s, %s)", settings.nudge_cron_hours, settings.scheduler_timezone)
        yield
        if scheduler.running:
            scheduler.shutdown()

    app = FastAPI(
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        title="MentorMate API",
        description="AI mentor check-ins, chat and proactive nudges",
        version="1.0",
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.oracle = oracle or build_oracle(settings)
    app.state.tavus = tavus or build_tavus_client(settings)
    app.state.hub = hub or RealtimeHub()
    app.state.external_data = external_data or build_external_data_service(settings)

    app.state.limiter = limiter
    configure_chat_limit(settings.chat_rate_limit)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(profile_router.router)
    app.include_router(mentor_router.router)
    app.include_router(goal_router.router)
    app.include_router(checkin_router.router)
    app.include_router(chat_router.router)
    app.include_router(functions_router.router)
    app.include_router(avatar_router.router)
    app.include_router(webhook_router.router)
    app.include_router(stream_router.router)
    app.include_router(healthz_router.router)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exceeded_handler(request, exc):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please slow down."}
        )

    @app.get("/")
    def read_root():
        return {"message": "Welcome to MentorMate backend Live"}

    @app.get("/health", tags=["Infra"])
    def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
