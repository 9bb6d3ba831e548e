# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pure functions deriving what is visible at a given virtual time.

Everything is recomputed from the parsed events on each call instead of
patched incrementally, so seeking backwards needs no special handling.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from logflix.cast.models import AnnotationRecord, EventKind, ParsedCast, PlaybackEvent
from logflix.playback.timeline import (
    MarkerKind,
    TimelineMarker,
    format_clock,
    marker_percent,
    position_label,
    progress_percent,
)
from logflix.terminal.sanitize import sanitize_output

if TYPE_CHECKING:
    from logflix.playback.clock import PlaybackState


class MarkerView(BaseModel):
    timestamp: float
    kind: MarkerKind
    percent: float
    label: str


class PlaybackFrame(BaseModel):
    """Snapshot of everything a renderer needs for one moment of playback."""

    virtual_time: float
    max_time: float
    is_playing: bool
    is_scrubbing: bool
    speed: float
    visible_text: str
    annotation: AnnotationRecord | None = None
    elapsed: str
    total: str
    progress_percent: float
    markers: list[MarkerView] = Field(default_factory=list)
    position: str = ""
    auto_scroll: bool = False
    is_empty: bool = False


def visible_event_count(events: Sequence[PlaybackEvent], virtual_time: float) -> int:
    """Number of leading events with timestamp <= virtual_time."""
    return bisect_right(events, virtual_time, key=lambda event: event.timestamp)


def derive_visible_text(events: Sequence[PlaybackEvent], virtual_time: float) -> str:
    """Sanitized concatenation of every output payload at or before virtual_time."""
    visible = events[: visible_event_count(events, virtual_time)]
    raw = "".join(event.payload for event in visible if event.kind is EventKind.OUTPUT)
    return sanitize_output(raw)


def derive_current_annotation(
    annotations: Sequence[AnnotationRecord], virtual_time: float
) -> AnnotationRecord | None:
    """Most recent annotation at or before virtual_time, if any."""
    index = bisect_right(annotations, virtual_time, key=lambda record: record.timestamp)
    if index == 0:
        return None
    return annotations[index - 1]


def _marker_label(index: int, marker: TimelineMarker) -> str:
    if marker.kind is MarkerKind.ANNOTATION:
        return f"Agent Thinking {index + 1} • {format_clock(marker.timestamp)}"
    return f"Navigate to {format_clock(marker.timestamp)}"


def build_frame(
    cast: ParsedCast,
    markers: list[TimelineMarker],
    state: PlaybackState,
    *,
    visible_text: str | None = None,
    auto_scroll: bool = False,
) -> PlaybackFrame:
    """Assemble a frame; ``visible_text`` may be passed in when already computed."""
    max_time = cast.max_time
    t = state.virtual_time
    if visible_text is None:
        visible_text = derive_visible_text(cast.events, t)
    return PlaybackFrame(
        virtual_time=t,
        max_time=max_time,
        is_playing=state.is_playing,
        is_scrubbing=state.is_scrubbing,
        speed=state.speed,
        visible_text=visible_text,
        annotation=derive_current_annotation(cast.annotations, t),
        elapsed=format_clock(t),
        total=format_clock(max_time),
        progress_percent=progress_percent(t, max_time),
        markers=[
            MarkerView(
                timestamp=marker.timestamp,
                kind=marker.kind,
                percent=marker_percent(marker, max_time),
                label=_marker_label(i, marker),
            )
            for i, marker in enumerate(markers)
        ],
        position=position_label(markers, t),
        auto_scroll=auto_scroll,
        is_empty=cast.is_empty,
    )
