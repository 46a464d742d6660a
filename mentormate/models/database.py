# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# ✅ Base model
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Engine for the given URL. Postgres (Supabase transaction pooler) gets a
    pooled engine; SQLite is used for local runs and tests.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_size=10,          # Keep 10 connections open
        max_overflow=20,       # Allow 20 extra if under load
        pool_recycle=1800,     # Recycle every 30 mins
        pool_pre_ping=True     # Validate before using connection
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    # ✅ Session factory
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_all_tables(engine: Engine) -> None:
    import mentormate.models  # noqa: F401  registers all models
    Base.metadata.create_all(bind=engine)
