# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cast playback API routes.

Provides REST endpoints for browsing recordings and a WebSocket that runs a
live playback session, streaming a frame after every state change.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from logflix.defaults import DEFAULT_SPEED, MIN_TICK_MS
from logflix.logging import get_logger
from logflix.playback.clock import PlaybackController, PlaybackState
from logflix.playback.derive import PlaybackFrame, build_frame
from logflix.playback.exceptions import CastNotFoundError, PlaybackError
from logflix.playback.timeline import build_markers

if TYPE_CHECKING:
    from logflix.library import CastLibrary

logger = get_logger(__name__)

router = APIRouter()

_library: CastLibrary | None = None
_speed: float = DEFAULT_SPEED
_min_tick_ms: float = MIN_TICK_MS


def setup(library: CastLibrary, *, speed: float = DEFAULT_SPEED, min_tick_ms: float = MIN_TICK_MS) -> APIRouter:
    """Configure router with a cast library.

    Args:
        library: CastLibrary instance
        speed: Initial speed for live playback sessions
        min_tick_ms: Floor on the delay between playback ticks

    Returns:
        Configured APIRouter
    """
    global _library, _speed, _min_tick_ms  # noqa: PLW0603
    _library = library
    _speed = speed
    _min_tick_ms = min_tick_ms
    return router


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _frame_message(frame: PlaybackFrame) -> dict[str, Any]:
    return {"type": "frame", **frame.model_dump(mode="json")}


def apply_command(controller: PlaybackController, message: dict[str, Any]) -> None:
    """Apply one client control message to a controller.

    Raises:
        PlaybackError: For unsupported speeds or unknown marker indexes
        ValueError, KeyError, TypeError, OverflowError: For malformed messages
    """
    command = message.get("type")
    match command:
        case "play":
            controller.play()
        case "pause":
            controller.pause()
        case "toggle":
            controller.toggle()
        case "reset":
            controller.reset()
        case "speed":
            controller.set_speed(float(message["value"]))
        case "seek":
            controller.seek(float(message["t"]))
        case "seek_marker":
            controller.seek_marker(int(message["index"]))
        case "scrub_start":
            controller.begin_scrub()
        case "scrub_end":
            controller.end_scrub()
        case _:
            raise ValueError(f"Unknown command: {command}")


@router.get("/casts")
async def list_casts():
    """List available cast recordings."""
    assert _library is not None
    return {"casts": _library.list_casts()}


@router.get("/casts/{cast_id:path}/frame")
async def get_frame(cast_id: str, t: float = 0.0):
    """Render the session as it looks at ``t`` seconds."""
    assert _library is not None
    try:
        cast = _library.load(cast_id)
    except CastNotFoundError as e:
        return _error(str(e), 404)
    except ValueError as e:
        return _error(str(e), 400)
    state = PlaybackState(virtual_time=max(0.0, min(cast.max_time, t)))
    frame = build_frame(cast, build_markers(cast), state)
    return frame.model_dump(mode="json")


@router.get("/casts/{cast_id:path}")
async def get_cast(cast_id: str):
    """Summary of a cast: duration, event counts and timeline markers."""
    assert _library is not None
    try:
        return _library.summary(cast_id)
    except CastNotFoundError as e:
        return _error(str(e), 404)
    except ValueError as e:
        return _error(str(e), 400)


@router.websocket("/ws/casts/{cast_id:path}/play")
async def play_cast(websocket: WebSocket, cast_id: str):
    """WebSocket endpoint running one live playback session."""
    assert _library is not None
    await websocket.accept()
    try:
        cast = _library.load(cast_id)
    except (CastNotFoundError, ValueError) as e:
        await websocket.send_json({"type": "error", "message": str(e)})
        await websocket.close(code=1008)
        return

    controller = PlaybackController(cast, speed=_speed, min_tick_ms=_min_tick_ms)
    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
    controller.subscribe(lambda frame: outbox.put_nowait(_frame_message(frame)))

    async def _sender() -> None:
        while True:
            await websocket.send_json(await outbox.get())

    sender = asyncio.create_task(_sender())
    outbox.put_nowait(_frame_message(controller.frame()))
    logger.info("playback_session_opened", cast_id=cast_id, events=len(cast.events))

    try:
        while True:
            text = await websocket.receive_text()
            queued = outbox.qsize()
            try:
                message = json.loads(text)
                apply_command(controller, message if isinstance(message, dict) else {})
            except (PlaybackError, ValueError, KeyError, TypeError, OverflowError, RecursionError) as e:
                outbox.put_nowait({"type": "error", "message": str(e)})
                continue
            if outbox.qsize() == queued:
                outbox.put_nowait(_frame_message(controller.frame()))
    except WebSocketDisconnect:
        logger.debug("playback_session_disconnected", cast_id=cast_id)
    finally:
        controller.close()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
        logger.info("playback_session_closed", cast_id=cast_id)
