# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Real-time replay of a cast file in the local terminal."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from logflix.cast.parser import load_cast
from logflix.defaults import DEFAULT_SPEED, MIN_TICK_MS
from logflix.logging import get_logger
from logflix.playback.clock import PlaybackController
from logflix.playback.derive import PlaybackFrame
from logflix.replay.render import render_frame

logger = get_logger(__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[H"


async def replay_cast(
    cast_path: str | Path,
    *,
    speed: float = DEFAULT_SPEED,
    clear: bool = True,
    show_annotations: bool = True,
    start_at: float = 0.0,
    min_tick_ms: float = MIN_TICK_MS,
    out: TextIO | None = None,
) -> PlaybackFrame:
    """Play a cast to completion, redrawing on every frame.

    Returns the final frame.
    """
    stream = out or sys.stdout
    cast = load_cast(cast_path)
    controller = PlaybackController(cast, speed=speed, min_tick_ms=min_tick_ms)
    finished = asyncio.Event()
    last: list[PlaybackFrame] = [controller.frame()]

    def _draw(frame: PlaybackFrame) -> None:
        last[0] = frame
        if clear:
            stream.write(CLEAR_SCREEN)
        stream.write(render_frame(frame, show_annotations=show_annotations))
        stream.flush()
        if not frame.is_playing and not frame.is_scrubbing:
            finished.set()

    if start_at:
        controller.seek(start_at)
    controller.subscribe(_draw)

    if cast.is_empty:
        _draw(controller.frame())
        controller.close()
        return last[0]

    logger.info("replay_started", path=str(cast_path), speed=speed, max_time=cast.max_time)
    try:
        controller.play()
        await finished.wait()
    finally:
        controller.close()
    logger.info("replay_finished", path=str(cast_path))
    return last[0]
