# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the MentorMate project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])


async def _forward(websocket: WebSocket, subscription) -> None:
    while True:
        message = await subscription.get()
        await websocket.send_json({"type": "message", "message": message})


async def _drain(websocket: WebSocket) -> None:
    # Only an unsubscribe frame is acted on; anything else is ignored
    while True:
        text = await websocket.receive_text()
        try:
            frame = json.loads(text)
        except ValueError:
            continue
        if isinstance(frame, dict) and frame.get("type") == "unsubscribe":
            return


@router.websocket("/chat/{session_id}")
async def stream_chat_messages(websocket: WebSocket, session_id: str):
    """
    Pushes every message inserted into the session, in insertion order,
    until the client disconnects or sends {"type": "unsubscribe"}.
    """
    hub = websocket.app.state.hub
    await websocket.accept()
    subscription = hub.subscribe(session_id)

    tasks = []
    disconnected = False
    try:
        await websocket.send_json({"type": "subscribed", "session_id": session_id})
        tasks = [
            asyncio.create_task(_forward(websocket, subscription)),
            asyncio.create_task(_drain(websocket)),
        ]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if isinstance(exc, WebSocketDisconnect):
                disconnected = True
            elif exc is not None:
                logger.error("❌ Stream for session %s failed: %s", session_id, exc)
    except WebSocketDisconnect:
        disconnected = True
    finally:
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        subscription.close()

    # Cleanup is finished before the close frame goes out
    if not disconnected and websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()
    logger.info("🔌 Stream closed for session %s", session_id)
