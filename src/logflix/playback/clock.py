# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Playback clock driving a virtual time cursor from event to event.

The controller owns a single pending timer. Every change to play state,
speed or time cancels that timer and arms a new one for the next event, so
there is never more than one tick in flight. Ticks carry the generation they
were armed in; loading new content or closing bumps the generation and any
tick from the old session is ignored.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from logflix.cast.models import ParsedCast, PlaybackEvent
from logflix.cast.parser import parse_cast
from logflix.defaults import DEFAULT_SPEED, MIN_TICK_MS, SUPPORTED_SPEEDS
from logflix.logging import get_logger
from logflix.playback.derive import (
    PlaybackFrame,
    build_frame,
    derive_visible_text,
    visible_event_count,
)
from logflix.playback.exceptions import MarkerNotFoundError, UnsupportedSpeedError
from logflix.playback.timeline import TimelineMarker, build_markers

logger = get_logger(__name__)

FrameListener = Callable[[PlaybackFrame], None]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Something that can run a callback once after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class PlayMode(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    SCRUBBING = "scrubbing"


@dataclass
class PlaybackState:
    virtual_time: float = 0.0
    is_playing: bool = False
    speed: float = DEFAULT_SPEED
    is_scrubbing: bool = False
    was_playing_before_scrub: bool = False

    @property
    def mode(self) -> PlayMode:
        if self.is_scrubbing:
            return PlayMode.SCRUBBING
        if self.is_playing:
            return PlayMode.PLAYING
        return PlayMode.STOPPED


def check_speed(speed: float) -> float:
    speed = float(speed)
    if speed not in SUPPORTED_SPEEDS:
        raise UnsupportedSpeedError(f"Unsupported speed {speed}; expected one of {SUPPORTED_SPEEDS}")
    return speed


class PlaybackController:
    """Replays one parsed cast against a virtual clock."""

    def __init__(
        self,
        cast: ParsedCast | str | None = None,
        *,
        scheduler: Scheduler | None = None,
        speed: float = DEFAULT_SPEED,
        min_tick_ms: float = MIN_TICK_MS,
    ) -> None:
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._min_tick_ms = float(min_tick_ms)
        self._pending: Cancellable | None = None
        self._generation = 0
        self._closed = False
        self._listeners: list[FrameListener] = []
        self._cast = ParsedCast()
        self._markers: list[TimelineMarker] = []
        self._text_cache: tuple[int, str] = (0, "")
        self._last_text = ""
        self.state = PlaybackState(speed=check_speed(speed))
        if cast is not None:
            self.load(cast)

    @property
    def cast(self) -> ParsedCast:
        return self._cast

    @property
    def markers(self) -> list[TimelineMarker]:
        return self._markers

    @property
    def max_time(self) -> float:
        return self._cast.max_time

    @property
    def has_pending_tick(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: FrameListener) -> Callable[[], None]:
        """Register a frame listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def frame(self, *, auto_scroll: bool = False) -> PlaybackFrame:
        return build_frame(
            self._cast,
            self._markers,
            self.state,
            visible_text=self._visible_text(),
            auto_scroll=auto_scroll,
        )

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def load(self, cast: ParsedCast | str) -> None:
        """Replace the session content, cancelling anything scheduled for the old one."""
        if isinstance(cast, str):
            cast = parse_cast(cast)
        self._cancel_pending()
        self._generation += 1
        self._cast = cast
        self._markers = build_markers(cast)
        self._text_cache = (0, "")
        self._last_text = ""
        self.state = PlaybackState(speed=self.state.speed)
        logger.debug(
            "playback_loaded",
            events=len(cast.events),
            annotations=len(cast.annotations),
            max_time=cast.max_time,
        )
        self._changed()

    def play(self) -> None:
        if self._closed or self._cast.is_empty:
            return
        if self.state.is_scrubbing:
            self.state.was_playing_before_scrub = True
            self._notify(auto_scroll=False)
            return
        if self.state.is_playing:
            return
        self.state.is_playing = True
        logger.debug("playback_started", virtual_time=self.state.virtual_time, speed=self.state.speed)
        self._changed()

    def pause(self) -> None:
        if self.state.is_scrubbing:
            self.state.was_playing_before_scrub = False
            self._notify(auto_scroll=False)
            return
        if not self.state.is_playing:
            return
        self.state.is_playing = False
        logger.debug("playback_paused", virtual_time=self.state.virtual_time)
        self._changed()

    def toggle(self) -> None:
        playing = self.state.was_playing_before_scrub if self.state.is_scrubbing else self.state.is_playing
        if playing:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        """Jump back to the start without changing play state."""
        self.seek(0.0)

    def set_speed(self, speed: float) -> None:
        self.state.speed = check_speed(speed)
        self._changed()

    def seek(self, timestamp: float) -> None:
        """Move the cursor directly; allowed in any state."""
        self.state.virtual_time = max(0.0, min(self.max_time, float(timestamp)))
        self._changed()

    def seek_marker(self, index: int) -> None:
        if not 0 <= index < len(self._markers):
            raise MarkerNotFoundError(f"No timeline marker at index {index} (have {len(self._markers)})")
        self.seek(self._markers[index].timestamp)

    def begin_scrub(self) -> None:
        if self.state.is_scrubbing:
            return
        self.state.was_playing_before_scrub = self.state.is_playing
        self.state.is_scrubbing = True
        self.state.is_playing = False
        self._changed()

    def end_scrub(self) -> None:
        if not self.state.is_scrubbing:
            return
        resume = self.state.was_playing_before_scrub
        self.state.is_scrubbing = False
        self.state.was_playing_before_scrub = False
        if resume and not self._closed and not self._cast.is_empty:
            self.state.is_playing = True
        self._changed()

    def close(self) -> None:
        """Cancel any pending tick and stop reacting to the scheduler."""
        if self._closed:
            return
        self._cancel_pending()
        self._generation += 1
        self._closed = True
        self.state.is_playing = False
        self._listeners.clear()
        logger.debug("playback_closed")

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _next_event(self, virtual_time: float) -> PlaybackEvent | None:
        index = visible_event_count(self._cast.events, virtual_time)
        if index >= len(self._cast.events):
            return None
        return self._cast.events[index]

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _arm(self) -> None:
        self._cancel_pending()
        state = self.state
        if self._closed or not state.is_playing or state.is_scrubbing or self._cast.is_empty:
            return

        upcoming = self._next_event(state.virtual_time)
        if upcoming is None:
            state.is_playing = False
            state.virtual_time = self.max_time
            logger.debug("playback_finished", virtual_time=state.virtual_time)
            return

        target = upcoming.timestamp
        delay_ms = max(self._min_tick_ms, (target - state.virtual_time) * 1000 / state.speed)
        generation = self._generation
        self._pending = self._scheduler.call_later(delay_ms / 1000, lambda: self._tick(generation, target))

    def _tick(self, generation: int, target: float) -> None:
        if self._closed or generation != self._generation:
            return
        self._pending = None
        self.state.virtual_time = target
        self._changed()

    def _changed(self) -> None:
        following = self.state.is_playing and not self.state.is_scrubbing
        self._arm()
        self._notify(auto_scroll=following)

    def _visible_text(self) -> str:
        count = visible_event_count(self._cast.events, self.state.virtual_time)
        cached_count, cached_text = self._text_cache
        if count != cached_count:
            cached_text = derive_visible_text(self._cast.events, self.state.virtual_time)
            self._text_cache = (count, cached_text)
        return cached_text

    def _notify(self, *, auto_scroll: bool) -> None:
        text = self._visible_text()
        changed = text != self._last_text
        self._last_text = text
        if not self._listeners:
            return
        frame = self.frame(auto_scroll=auto_scroll and changed)
        for listener in list(self._listeners):
            listener(frame)
