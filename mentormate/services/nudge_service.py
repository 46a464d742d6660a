# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from mentormate.services.data_gateway import DataStoreGateway
from mentormate.services.message_generator import MessageGenerator
from mentormate.services.nudge_dispatcher import NudgeDispatchError, NudgeDispatcher
from mentormate.services.oracle_service import MentorOracle
from mentormate.services.pattern_analyzer import PatternAnalyzer
from mentormate.services.realtime_hub import RealtimeHub

logger = logging.getLogger(__name__)


@dataclass
class NudgeRunReport:
    success: bool
    nudges_sent: int = 0
    details: List[Dict[str, Any]] = field(default_factory=list)
    failed_users: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "success": self.success,
            "nudges_sent": self.nudges_sent,
            "details": self.details,
            "failed_users": self.failed_users,
        }
        if self.error:
            body["error"] = self.error
        return body


def nudge_user(gateway: DataStoreGateway, analyzer: PatternAnalyzer, generator: MessageGenerator,
               dispatcher: NudgeDispatcher, user, mentor_cache: Dict[str, Any],
               now: Optional[datetime] = None) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Analyze one user and deliver one message per detected pattern.

    Returns the delivered nudges and the pattern types whose delivery failed.
    A failed delivery does not stop the user's remaining patterns.
    """
    if not user.default_mentor_id:
        logger.info("⏭️ User %s has no default mentor. Skipping.", user.id)
        return [], []

    mentor = mentor_cache.get(user.default_mentor_id)
    if mentor is None:
        mentor, error = gateway.get_mentor(user.default_mentor_id)
        if error is not None:
            raise RuntimeError(f"Mentor lookup failed: {error}")
        if mentor is None:
            logger.warning("⚠️ Default mentor %s for user %s not found.", user.default_mentor_id, user.id)
            return [], []
        mentor_cache[mentor.id] = mentor

    sent, failed = [], []
    for pattern in analyzer.analyze(user.id, now=now):
        message = generator.generate(pattern, mentor, user)
        try:
            dispatcher.dispatch(message, now=now)
        except NudgeDispatchError as e:
            gateway.db.rollback()
            failed.append(pattern.type)
            logger.error("⚠️ %s nudge for user %s not delivered: %s", pattern.type, user.id, e)
            continue
        sent.append({"user_id": user.id, "pattern": pattern.type, "severity": pattern.severity.value})
    return sent, failed


def process_nudges(session_factory: Callable[[], Session], oracle: MentorOracle,
                   hub: Optional[RealtimeHub] = None, now: Optional[datetime] = None,
                   external_data=None) -> NudgeRunReport:
    """
    Batch job: scan every onboarded user and deliver proactive nudges.

    Users are processed sequentially; one user's failure is logged and rolled
    back without stopping the rest of the batch.
    """
    db = session_factory()
    try:
        gateway = DataStoreGateway(db)
        analyzer = PatternAnalyzer(gateway)
        generator = MessageGenerator(oracle, external_data=external_data)
        dispatcher = NudgeDispatcher(gateway, hub=hub)

        users, error = gateway.list_onboarded_profiles()
        if error is not None:
            logger.error("❌ Failed to fetch users for nudges: %s", error)
            return NudgeRunReport(success=False, error=f"Failed to fetch users: {error}")

        report = NudgeRunReport(success=True)
        mentor_cache: Dict[str, Any] = {}

        for user in users:
            try:
                sent, failed = nudge_user(gateway, analyzer, generator, dispatcher, user, mentor_cache, now=now)
                report.details.extend(sent)
                if failed:
                    report.failed_users.append(user.id)
            except Exception as e:
                db.rollback()
                report.failed_users.append(user.id)
                logger.error("⚠️ Nudge failed for user %s: %s", user.id, str(e))

        report.nudges_sent = len(report.details)
        logger.info("📤 Nudge run complete: %d sent, %d users failed", report.nudges_sent, len(report.failed_users))
        return report

    finally:
        db.close()
