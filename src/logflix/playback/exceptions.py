# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for playback operations."""


class PlaybackError(Exception):
    """Base exception for playback operations."""

    pass


class UnsupportedSpeedError(PlaybackError, ValueError):
    """Requested speed multiplier is not one of the supported values."""

    pass


class MarkerNotFoundError(PlaybackError, LookupError):
    """Timeline marker index does not exist."""

    pass


class CastNotFoundError(PlaybackError, LookupError):
    """No cast recording exists for the requested id."""

    pass
