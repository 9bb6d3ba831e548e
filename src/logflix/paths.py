# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filesystem paths and cast-root helpers."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

ENV_CAST_ROOT = "LOGFLIX_CAST_ROOT"


def default_cast_root() -> Path:
    """Get the default directory that holds recorded ``.cast`` files."""
    env_root = os.getenv(ENV_CAST_ROOT)
    if env_root:
        return Path(env_root)
    return Path(user_data_dir("logflix", "logflix")) / "casts"


def validate_cast_path(path: Path, root: Path) -> Path:
    """Ensure path is within the cast root to prevent path injection.

    Args:
        path: Path to validate
        root: Cast root directory

    Returns:
        Resolved path if valid

    Raises:
        ValueError: If path is outside the cast root
    """
    resolved = path.resolve()
    root_resolved = root.resolve()

    if resolved != root_resolved and root_resolved not in resolved.parents:
        raise ValueError(f"Path outside cast root: {path}")

    return resolved
