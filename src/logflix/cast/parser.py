# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parser for newline-delimited JSON cast logs.

A cast log is a header object (``{"version": 2, ...}``) followed by event
triples ``[timestamp, kind, payload]``. Parsing is best effort: captures can
end with truncated lines, so anything that does not fit the expected shape
is skipped instead of raised.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from logflix.cast.models import AnnotationRecord, EventKind, ParsedCast, PlaybackEvent, as_finite_float
from logflix.logging import get_logger

logger = get_logger(__name__)

_KINDS = {kind.value: kind for kind in EventKind}


def _decode_annotation(timestamp: float, payload: Any) -> AnnotationRecord:
    if isinstance(payload, dict):
        return AnnotationRecord.from_payload(timestamp, payload)
    if not isinstance(payload, str):
        return AnnotationRecord.from_payload(timestamp, json.dumps(payload))
    try:
        decoded = json.loads(payload)
    except (ValueError, RecursionError):
        decoded = None
    if isinstance(decoded, dict):
        return AnnotationRecord.from_payload(timestamp, decoded)
    return AnnotationRecord.from_payload(timestamp, payload)


def parse_cast(text: str) -> ParsedCast:
    """Parse raw cast text into ordered events and decoded annotations.

    The first event sets the session's zero point; every timestamp is stored
    relative to it. Out-of-order timestamps are clamped to the latest one
    seen so the event list stays non-decreasing.
    """
    cast = ParsedCast()
    if not text:
        return cast

    zero_point: float | None = None
    latest = 0.0

    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except (ValueError, RecursionError):
            cast.skipped_lines += 1
            continue

        if isinstance(record, dict) and "version" in record:
            if cast.header is None:
                cast.header = record
            continue

        if not isinstance(record, list) or len(record) < 3:
            cast.skipped_lines += 1
            continue

        raw_ts, raw_kind, payload = record[0], record[1], record[2]
        absolute = as_finite_float(raw_ts)
        kind = _KINDS.get(raw_kind) if isinstance(raw_kind, str) else None
        if absolute is None or kind is None:
            cast.skipped_lines += 1
            continue
        if kind is not EventKind.ANNOTATION and not isinstance(payload, str):
            cast.skipped_lines += 1
            continue

        if zero_point is None:
            zero_point = absolute
        relative = max(absolute - zero_point, latest)
        if relative == float("inf"):
            cast.skipped_lines += 1
            continue
        latest = relative

        if kind is EventKind.ANNOTATION:
            annotation = _decode_annotation(relative, payload)
            cast.annotations.append(annotation)
            if not isinstance(payload, str):
                payload = json.dumps(payload)

        cast.events.append(PlaybackEvent(timestamp=relative, kind=kind, payload=payload))

    return cast


def load_cast(path: str | Path) -> ParsedCast:
    """Read and parse a cast file from disk."""
    path = Path(path)
    text = path.read_text(encoding="utf-8", errors="replace")
    cast = parse_cast(text)
    logger.debug(
        "cast_loaded",
        path=str(path),
        events=len(cast.events),
        annotations=len(cast.annotations),
        skipped_lines=cast.skipped_lines,
    )
    return cast
