# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import uuid
from typing import Any, Dict, Optional

import requests

from mentormate.models.avatar import AvatarStatus, VideoStatus
from mentormate.services.data_gateway import DataStoreGateway
from mentormate.utils.settings import Settings

logger = logging.getLogger(__name__)

WEBHOOK_EVENTS = (
    "avatar.ready", "avatar.error",
    "video.completed", "video.error",
    "voice.ready", "voice.error",
)


class TavusError(Exception):
    pass


class TavusClient:
    """Submits video jobs. Without an API key it hands out mock job ids."""

    def __init__(self, api_key: Optional[str], api_url: str = "https://tavusapi.com/v2",
                 webhook_url: Optional[str] = None, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.http = session or requests.Session()

    @property
    def is_mock(self) -> bool:
        return not self.api_key

    def create_video(self, script: str, avatar_id: str, video_name: Optional[str] = None) -> Dict[str, Any]:
        if self.is_mock:
            job_id = f"mock-{uuid.uuid4().hex[:12]}"
            logger.info("🎬 Mock Tavus video job %s", job_id)
            return {"video_id": job_id, "status": "queued", "mock": True}

        body = {"replica_id": avatar_id, "script": script}
        if video_name:
            body["video_name"] = video_name
        if self.webhook_url:
            body["callback_url"] = self.webhook_url

        try:
            response = self.http.post(
                f"{self.api_url}/videos",
                headers={"x-api-key": self.api_key, "Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise TavusError(f"Tavus video request failed: {e}") from e

        if not result.get("video_id"):
            raise TavusError(f"Unexpected Tavus response: {result}")
        return result

    def create_avatar(self, name: str, video: bytes, filename: str = "training.mp4",
                      content_type: str = "video/mp4") -> Dict[str, Any]:
        """Upload a training video. The avatar trains asynchronously and reports back by webhook."""
        if self.is_mock:
            avatar_id = f"mock_avatar_{uuid.uuid4().hex[:12]}"
            logger.info("🎭 Mock Tavus avatar %s", avatar_id)
            return {"avatar_id": avatar_id, "avatar_name": name, "status": "training", "mock": True}

        form = {"avatar_name": name}
        if self.webhook_url:
            form["callback_url"] = f"{self.webhook_url.rstrip('/')}/avatar"

        try:
            response = self.http.post(
                f"{self.api_url}/avatars",
                headers={"x-api-key": self.api_key},
                data=form,
                files={"video": (filename, video, content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise TavusError(f"Tavus avatar request failed: {e}") from e

        if not result.get("avatar_id"):
            raise TavusError(f"Unexpected Tavus response: {result}")
        return result


def build_tavus_client(settings: Settings) -> TavusClient:
    return TavusClient(
        api_key=settings.tavus_api_key,
        api_url=settings.tavus_api_url,
        webhook_url=settings.tavus_webhook_url,
    )


def request_checkin_video(gateway: DataStoreGateway, tavus: TavusClient, user_id: str, avatar_id: str,
                          script: str, checkin_id: Optional[str] = None,
                          mentor_response=None):
    """
    Queue a mentor video for a check-in reply. A Tavus failure is recorded on
    the job row and never propagates to the caller.
    """
    job, error = gateway.create_video_generation(
        user_id=user_id,
        checkin_id=checkin_id,
        mentor_response_id=getattr(mentor_response, "id", None),
        avatar_id=avatar_id,
        script_text=script,
        status=VideoStatus.queued,
    )
    if error is not None or job is None:
        logger.error("❌ Could not record video job for user %s: %s", user_id, error)
        return None

    try:
        result = tavus.create_video(script, avatar_id, video_name=f"checkin-{checkin_id}")
    except TavusError as e:
        logger.warning("⚠️ Tavus unavailable for job %s: %s", job.id, e)
        job.status = VideoStatus.failed
        job.error_message = str(e)
        gateway.db.commit()
        return job

    job.tavus_request_id = result["video_id"]
    job.status = VideoStatus.generating
    job.job_metadata = {"mock": bool(result.get("mock"))}
    if mentor_response is not None:
        mentor_response.tavus_video_id = result["video_id"]
    gateway.db.commit()
    return job


def register_custom_avatar(gateway: DataStoreGateway, tavus: TavusClient, user_id: str, name: str,
                           video: bytes, filename: str = "training.mp4", content_type: str = "video/mp4"):
    """Start avatar training and record the avatar as training. TavusError propagates; no row is written then."""
    result = tavus.create_avatar(name, video, filename=filename, content_type=content_type)

    avatar, error = gateway.create_custom_avatar(
        user_id=user_id,
        name=name,
        tavus_avatar_id=result["avatar_id"],
        status=AvatarStatus.training,
        configuration={"mock": bool(result.get("mock")), "filename": filename},
    )
    if error is not None:
        return None, error
    logger.info("🎭 Avatar %s training for user %s", avatar.tavus_avatar_id, user_id)
    return avatar, None


# -------------------------------
# Webhook events
# -------------------------------

def handle_webhook_event(gateway: DataStoreGateway, event_type: str, data: Dict[str, Any]) -> str:
    """
    Apply one Tavus webhook event by job id. Idempotent: replaying an event
    writes the same values again. A missing row is logged, not raised.
    Returns a short outcome label.
    """
    job_id = data.get("id")
    if not job_id:
        logger.warning("⚠️ Tavus event %s without job id", event_type)
        return "ignored"

    if event_type == "avatar.ready":
        updated, error = gateway.update_avatar_status(job_id, AvatarStatus.ready)
    elif event_type == "avatar.error":
        updated, error = gateway.update_avatar_status(job_id, AvatarStatus.failed)
    elif event_type == "video.completed":
        updated, error = gateway.update_video_generation(
            job_id, VideoStatus.completed,
            video_url=data.get("video_url") or data.get("download_url"),
            thumbnail_url=data.get("thumbnail_url"),
        )
        if error is None:
            _, response_error = gateway.update_mentor_response_video(
                job_id, data.get("video_url") or data.get("download_url")
            )
            if response_error is not None:
                logger.error("❌ Error updating mentor response for video %s: %s", job_id, response_error)
    elif event_type == "video.error":
        updated, error = gateway.update_video_generation(
            job_id, VideoStatus.failed, error_message=data.get("error_message")
        )
    elif event_type == "voice.ready":
        updated, error = gateway.touch_profile_voice(job_id)
    elif event_type == "voice.error":
        logger.error("❌ Voice training failed for %s: %s", job_id, data.get("error_message"))
        return "logged"
    else:
        logger.info("Unknown Tavus event type: %s", event_type)
        return "unknown"

    if error is not None:
        logger.error("❌ Error applying Tavus event %s for %s: %s", event_type, job_id, error)
        return "error"
    if not updated:
        logger.warning("⚠️ No row matched Tavus event %s for %s", event_type, job_id)
        return "not_found"
    return "updated"
