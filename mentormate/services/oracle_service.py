# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from dataclasses import dataclass, field
from time import sleep
from typing import Dict, List, Optional

import requests

from mentormate.utils.settings import Settings

logger = logging.getLogger(__name__)


class OracleError(Exception):
    """The text-generation service could not produce a completion."""


@dataclass
class OracleCompletion:
    text: str
    model: str
    usage: Dict[str, Optional[int]] = field(default_factory=dict)


class MentorOracle:
    """Interface for the external text-generation service."""

    model = "unknown"

    def complete(self, messages: List[Dict[str, str]], max_tokens: int = 200,
                 temperature: float = 0.7) -> OracleCompletion:
        raise NotImplementedError


class DisabledOracle(MentorOracle):
    """Used when no API key is configured; every call goes to the fallback path."""

    model = "disabled"

    def complete(self, messages, max_tokens=200, temperature=0.7) -> OracleCompletion:
        raise OracleError("OpenAI API key not configured")


class OpenAIOracle(MentorOracle):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini",
                 api_url: str = "https://api.openai.com/v1/chat/completions",
                 timeout: float = 20.0, max_retries: int = 2,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.http = session or requests.Session()

    def complete(self, messages: List[Dict[str, str]], max_tokens: int = 200,
                 temperature: float = 0.7) -> OracleCompletion:
        """
        Send the chat messages to the completions endpoint and return the text.
        Transport errors are retried; a non-2xx answer or a missing completion
        fails immediately.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "presence_penalty": 0.1,
            "frequency_penalty": 0.1,
        }

        try_count = 0
        while True:
            try:
                response = self.http.post(self.api_url, headers=headers, json=body, timeout=self.timeout)
                break
            except requests.exceptions.RequestException as e:
                try_count += 1
                if try_count >= self.max_retries:
                    raise OracleError(f"Oracle unreachable after {try_count} attempts: {e}") from e
                logger.warning("⚠️ Oracle request failed (attempt %d/%d). Retrying...", try_count, self.max_retries)
                sleep(0.5)  # brief pause before retry

        if not response.ok:
            detail = ""
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = payload.get("error") if isinstance(payload, dict) else None
            if isinstance(error, dict):
                detail = error.get("message") or ""
            elif isinstance(error, str):
                detail = error
            raise OracleError(f"OpenAI API error {response.status_code}: {detail or 'Unknown error'}")

        try:
            result = response.json()
        except ValueError as e:
            raise OracleError("Oracle returned a non-JSON body") from e

        choices = result.get("choices") or []
        content = ""
        if choices:
            content = ((choices[0] or {}).get("message") or {}).get("content") or ""
        content = content.strip()
        if not content:
            raise OracleError("No response generated from AI")

        usage = result.get("usage") or {}
        return OracleCompletion(
            text=content,
            model=result.get("model", self.model),
            usage={
                "prompt_tokens": usage.get("prompt_tokens"),
                "completion_tokens": usage.get("completion_tokens"),
                "total_tokens": usage.get("total_tokens"),
            },
        )


def build_oracle(settings: Settings) -> MentorOracle:
    if not settings.openai_api_key:
        return DisabledOracle()
    return OpenAIOracle(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        api_url=settings.openai_api_url,
        timeout=settings.oracle_timeout_seconds,
        max_retries=settings.oracle_max_retries,
    )
