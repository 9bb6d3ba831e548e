# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Escape-code stripping for replayed terminal output.

Nothing here interprets cursor movement or colors; sequences are removed so
the remaining text can be shown as preformatted output. Every ESC left over
after the structured patterns is dropped with the other control characters,
which is what makes ``sanitize_output`` idempotent.
"""

from __future__ import annotations

import re

# Order matters: structured sequences first, then leftovers.
_CONTROL_PATTERNS: tuple[re.Pattern[str], ...] = (
    # CSI with parameters and any letter terminator (SGR, cursor, erase, scroll region)
    re.compile(r"\x1b\[[0-9;]*[A-Za-z]"),
    # Private mode toggles such as bracketed paste (?2004h / ?2004l)
    re.compile(r"\x1b\[\?[0-9;]*[hl]"),
    # Any other single uppercase-letter CSI
    re.compile(r"\x1b\[[0-9]*[A-Z]"),
    # Bare cursor home / erase
    re.compile(r"\x1b[HJ]"),
    # OSC terminated by BEL or ST
    re.compile(r"\x1b\][0-9;]*.*?\x07"),
    re.compile(r"\x1b\][0-9;]*.*?\x1b\\"),
    # DCS, SOS, PM, APC
    re.compile(r"\x1b[PX^_][^\x1b]*\x1b\\"),
    # Keypad modes, charset selection, other two-character escapes
    re.compile(r"\x1b[>=]"),
    re.compile(r"\x1b[()][AB012]"),
    re.compile(r"\x1b[#-/][0-9A-Za-z]"),
    # C1 introducers
    re.compile(r"\x1b[NOPQRSTUVWXYZ\[\\\]^_`]"),
    # Remaining C0 controls and DEL, keeping \t \n \r
    re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]"),
)

_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{4,}")


def strip_control_sequences(chunk: str) -> str:
    """Remove escape sequences and control characters, normalizing line endings."""
    if not chunk:
        return ""
    cleaned = chunk
    for pattern in _CONTROL_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    return cleaned.replace("\r\n", "\n").replace("\r", "\n")


def tidy_output(text: str) -> str:
    """Readability pass over already-stripped output.

    Trailing whitespace goes before blank runs are collapsed; the other order
    can leave a fresh run of four newlines behind.
    """
    if not text:
        return ""
    tidied = _TRAILING_SPACE_RE.sub("", text)
    tidied = _BLANK_RUN_RE.sub("\n\n\n", tidied)
    return tidied.rstrip()


def sanitize_output(raw: str) -> str:
    """Full pipeline: strip control sequences, then tidy for display."""
    return tidy_output(strip_control_sequences(raw))
