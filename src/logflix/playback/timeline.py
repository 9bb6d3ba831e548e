# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Seek markers for the playback timeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from logflix.cast.models import EventKind, ParsedCast
from logflix.defaults import (
    MAX_NAVIGATION_MARKERS,
    MIN_NAVIGATION_MARKERS,
    NAVIGATION_MARKER_INTERVAL_S,
)


class MarkerKind(str, Enum):
    ANNOTATION = "annotation"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class TimelineMarker:
    timestamp: float
    kind: MarkerKind


def navigation_marker_count(max_time: float) -> int:
    """Number of segments the timeline is split into when no annotations exist."""
    count = math.floor(max_time / NAVIGATION_MARKER_INTERVAL_S)
    return min(MAX_NAVIGATION_MARKERS, max(MIN_NAVIGATION_MARKERS, count))


def build_markers(cast: ParsedCast) -> list[TimelineMarker]:
    """Annotation markers, or evenly spaced navigation markers as a fallback."""
    annotated = [
        TimelineMarker(event.timestamp, MarkerKind.ANNOTATION)
        for event in cast.events
        if event.kind is EventKind.ANNOTATION
    ]
    if annotated:
        return annotated

    max_time = cast.max_time
    if cast.is_empty or max_time <= 0:
        return []
    count = navigation_marker_count(max_time)
    return [TimelineMarker(i * max_time / count, MarkerKind.NAVIGATION) for i in range(1, count)]


def marker_percent(marker: TimelineMarker, max_time: float) -> float:
    """Marker position along the progress bar, in percent."""
    if max_time <= 0:
        return 0.0
    return max(0.0, min(100.0, marker.timestamp / max_time * 100))


def progress_percent(virtual_time: float, max_time: float) -> float:
    if max_time <= 0:
        return 0.0
    return max(0.0, min(100.0, virtual_time / max_time * 100))


def marker_ordinal(markers: list[TimelineMarker], virtual_time: float) -> int:
    """How many markers have been reached, never below 1 once any marker exists."""
    if not markers:
        return 0
    reached = sum(1 for marker in markers if marker.timestamp <= virtual_time)
    return max(1, reached)


def position_label(markers: list[TimelineMarker], virtual_time: float) -> str:
    """Label such as ``Action 2 of 5``; empty when there are no markers."""
    if not markers:
        return ""
    noun = "Action" if any(m.kind is MarkerKind.ANNOTATION for m in markers) else "Position"
    return f"{noun} {marker_ordinal(markers, virtual_time)} of {len(markers)}"


def format_clock(seconds: float) -> str:
    """Format seconds as ``m:ss``."""
    total = max(0, math.floor(seconds))
    minutes, remainder = divmod(total, 60)
    return f"{minutes}:{remainder:02d}"
