# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal replay of cast recordings."""

from __future__ import annotations

from logflix.replay.render import annotation_sections, render_annotation, render_frame
from logflix.replay.viewer import replay_cast

__all__ = ["annotation_sections", "render_annotation", "render_frame", "replay_cast"]
