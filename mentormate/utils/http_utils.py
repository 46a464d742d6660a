# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import HTTPException


def ensure_found(data, error, what: str):
    """Turn a gateway ``(data, error)`` pair into a row or an HTTP error."""
    if error is not None:
        raise HTTPException(status_code=500, detail=f"Could not load {what}")
    if data is None:
        raise HTTPException(status_code=404, detail=f"{what[0].upper()}{what[1:]} not found")
    return data
