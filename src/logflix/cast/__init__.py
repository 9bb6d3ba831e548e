# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cast log model and parser."""

from __future__ import annotations

from logflix.cast.models import AnnotationRecord, EventKind, ParsedCast, PlannedCommand, PlaybackEvent
from logflix.cast.parser import load_cast, parse_cast

__all__ = [
    "AnnotationRecord",
    "EventKind",
    "ParsedCast",
    "PlannedCommand",
    "PlaybackEvent",
    "load_cast",
    "parse_cast",
]
