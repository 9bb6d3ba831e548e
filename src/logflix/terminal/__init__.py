# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal output cleanup."""

from __future__ import annotations

from logflix.terminal.sanitize import sanitize_output, strip_control_sequences, tidy_output

__all__ = ["sanitize_output", "strip_control_sequences", "tidy_output"]
