# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class Subscription:
    """
    One consumer's view of a session's message stream.

    Bound to the event loop that created it. ``close()`` detaches it from the
    hub; messages published afterwards are dropped instead of reaching a
    stale view.
    """

    def __init__(self, hub: "RealtimeHub", session_id: str, loop: asyncio.AbstractEventLoop,
                 maxsize: int = DEFAULT_QUEUE_SIZE):
        self.hub = hub
        self.session_id = session_id
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def _deliver(self, payload: Dict[str, Any]) -> None:
        if self.closed:
            return
        try:
            self.queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning("⚠️ Dropping message for slow subscriber on session %s", self.session_id)

    async def get(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        if timeout is None:
            return await self.queue.get()
        return await asyncio.wait_for(self.queue.get(), timeout)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.hub._remove(self)

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class RealtimeHub:
    """Per-session publish/subscribe for newly inserted chat messages."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscribers: Dict[str, Set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def subscribe(self, session_id: str) -> Subscription:
        """Must be called from inside a running event loop."""
        loop = asyncio.get_running_loop()
        subscription = Subscription(self, session_id, loop, maxsize=self.queue_size)
        with self._lock:
            self._subscribers[session_id].add(subscription)
        logger.info("📡 Subscribed to session %s", session_id)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.session_id)
            if subscribers is None:
                return
            subscribers.discard(subscription)
            if not subscribers:
                del self._subscribers[subscription.session_id]
        logger.info("📴 Unsubscribed from session %s", subscription.session_id)

    def subscriber_count(self, session_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(session_id, ()))

    def publish(self, message: Dict[str, Any]) -> int:
        """
        Fan a serialized ChatMessage out to the subscribers of its session.
        Safe to call from any thread. Returns the number of subscribers reached.
        """
        session_id = message.get("session_id")
        with self._lock:
            targets = list(self._subscribers.get(session_id, ()))

        delivered = 0
        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(subscription._deliver, message)
                delivered += 1
            except RuntimeError:
                # Loop already closed; the consumer is gone
                subscription.close()
        return delivered
