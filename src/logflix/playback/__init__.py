# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Playback engine: clock, derived content and timeline."""

from __future__ import annotations

from logflix.playback.clock import (
    AsyncioScheduler,
    PlaybackController,
    PlaybackState,
    PlayMode,
    Scheduler,
)
from logflix.playback.derive import (
    PlaybackFrame,
    build_frame,
    derive_current_annotation,
    derive_visible_text,
)
from logflix.playback.exceptions import (
    CastNotFoundError,
    MarkerNotFoundError,
    PlaybackError,
    UnsupportedSpeedError,
)
from logflix.playback.timeline import MarkerKind, TimelineMarker, build_markers, format_clock

__all__ = [
    "AsyncioScheduler",
    "CastNotFoundError",
    "MarkerKind",
    "MarkerNotFoundError",
    "PlayMode",
    "PlaybackController",
    "PlaybackError",
    "PlaybackFrame",
    "PlaybackState",
    "Scheduler",
    "TimelineMarker",
    "UnsupportedSpeedError",
    "build_frame",
    "build_markers",
    "derive_current_annotation",
    "derive_visible_text",
    "format_clock",
]
