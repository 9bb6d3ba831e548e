# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized default values for LogFlix."""

from __future__ import annotations

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 2280
SERVER_URL = f"http://{SERVER_HOST}:{SERVER_PORT}"

# Playback
SUPPORTED_SPEEDS: tuple[float, ...] = (0.5, 1.0, 2.0, 4.0)
DEFAULT_SPEED = 1.0
MIN_TICK_MS = 10.0

# Synthetic navigation markers: one per ~30s, between 3 and 8 segments
NAVIGATION_MARKER_INTERVAL_S = 30.0
MIN_NAVIGATION_MARKERS = 3
MAX_NAVIGATION_MARKERS = 8

CAST_SUFFIX = ".cast"
