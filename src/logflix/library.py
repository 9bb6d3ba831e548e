# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Access to recorded cast files on disk.

Provides listing, loading and summaries for the API and CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from logflix.cast.models import ParsedCast
from logflix.cast.parser import load_cast
from logflix.defaults import CAST_SUFFIX
from logflix.logging import get_logger
from logflix.paths import validate_cast_path
from logflix.playback.exceptions import CastNotFoundError
from logflix.playback.timeline import build_markers, format_clock

logger = get_logger(__name__)


class CastLibrary:
    """Service for finding and reading ``.cast`` recordings under one root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, cast_id: str) -> Path:
        """Resolve a cast id (relative path without suffix) to a file path.

        Raises:
            ValueError: If the id resolves outside the cast root
        """
        if not cast_id or cast_id.startswith("/"):
            raise ValueError(f"Invalid cast id: {cast_id!r}")
        return validate_cast_path(self.root / f"{cast_id}{CAST_SUFFIX}", self.root)

    def exists(self, cast_id: str) -> bool:
        try:
            return self.path_for(cast_id).is_file()
        except ValueError:
            return False

    def list_casts(self) -> list[str]:
        """Ids of every cast under the root, sorted."""
        if not self.root.is_dir():
            return []
        ids = []
        for path in self.root.rglob(f"*{CAST_SUFFIX}"):
            if path.is_file():
                ids.append(path.relative_to(self.root).with_suffix("").as_posix())
        return sorted(ids)

    def load(self, cast_id: str) -> ParsedCast:
        """Parse a cast by id.

        Raises:
            ValueError: If the id resolves outside the cast root
            CastNotFoundError: If no such cast exists
        """
        path = self.path_for(cast_id)
        if not path.is_file():
            raise CastNotFoundError(f"No cast named {cast_id}")
        return load_cast(path)

    def summary(self, cast_id: str) -> dict[str, Any]:
        cast = self.load(cast_id)
        markers = build_markers(cast)
        header = cast.header or {}
        return {
            "id": cast_id,
            "duration": cast.max_time,
            "duration_label": format_clock(cast.max_time),
            "counts": cast.counts(),
            "skipped_lines": cast.skipped_lines,
            "width": header.get("width"),
            "height": header.get("height"),
            "title": header.get("title"),
            "markers": [{"timestamp": m.timestamp, "kind": m.kind.value} for m in markers],
        }
