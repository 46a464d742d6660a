# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from mentormate.services.data_gateway import DataStoreGateway


# Dependency to get DB session
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_gateway(db: Session = Depends(get_db)) -> DataStoreGateway:
    return DataStoreGateway(db)


def get_oracle(request: Request):
    return request.app.state.oracle


def get_hub(request: Request):
    return request.app.state.hub


def get_tavus(request: Request):
    return request.app.state.tavus


def get_external_data(request: Request):
    return request.app.state.external_data


def get_prompt_context_source(request: Request):
    """External data for prompt enrichment, or None when it is switched off."""
    state = request.app.state
    return state.external_data if state.settings.external_context_enabled else None
