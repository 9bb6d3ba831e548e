# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data model for parsed cast recordings."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

COMMAND_TEXT_KEYS = ("command", "cmd", "text", "action")
COMMAND_TIMEOUT_KEYS = ("timeout", "timeout_sec", "max_timeout_sec")


class EventKind(str, Enum):
    """Event type codes used in the cast format."""

    INPUT = "i"
    OUTPUT = "o"
    ANNOTATION = "m"


@dataclass(frozen=True)
class PlaybackEvent:
    """A single event with its timestamp relative to the session start."""

    timestamp: float
    kind: EventKind
    payload: str


def as_finite_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


class PlannedCommand(BaseModel):
    """A command the agent planned to run, with an optional timeout in seconds."""

    text: str
    timeout: float | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> PlannedCommand:
        if isinstance(raw, str):
            return cls(text=raw)
        if not isinstance(raw, dict):
            return cls(text=str(raw))

        text = ""
        for key in COMMAND_TEXT_KEYS:
            value = raw.get(key)
            if isinstance(value, str) and value:
                text = value
                break
        if not text:
            strings = [v for v in raw.values() if isinstance(v, str)]
            if strings:
                text = strings[0]
            else:
                text = f"Unknown command format: {', '.join(str(k) for k in raw)}"

        timeout = None
        for key in COMMAND_TIMEOUT_KEYS:
            value = as_finite_float(raw.get(key))
            if value:
                timeout = value
                break
        return cls(text=text, timeout=timeout)


class AnnotationRecord(BaseModel):
    """Decoded "agent thinking" payload attached to a point in the session.

    Recognized fields are typed; anything else the agent emitted lands in
    ``extra`` in the order received. ``raw_content`` is only set when the
    payload could not be decoded as a JSON object.
    """

    timestamp: float = 0.0
    state_analysis: str | None = None
    explanation: str | None = None
    commands: list[PlannedCommand] = Field(default_factory=list)
    is_task_complete: bool | None = None
    extra: dict[str, Any] = Field(default_factory=dict)
    raw_content: str | None = None

    @classmethod
    def from_payload(cls, timestamp: float, payload: Any) -> AnnotationRecord:
        """Build a record from a decoded payload, never raising."""
        if not isinstance(payload, dict):
            raw = payload if isinstance(payload, str) else repr(payload)
            return cls(timestamp=timestamp, raw_content=raw)

        fields: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in payload.items():
            key = str(key)
            if key in ("state_analysis", "explanation") and isinstance(value, str):
                fields[key] = value
            elif key == "is_task_complete" and isinstance(value, bool):
                fields[key] = value
            elif key == "commands" and isinstance(value, list):
                fields[key] = [PlannedCommand.from_raw(item) for item in value]
            elif key in ("timestamp", "raw_content", "extra"):
                # Reserved names; keep the agent's value visible under a distinct key.
                extra[f"agent_{key}"] = value
            else:
                extra[key] = value
        return cls(timestamp=timestamp, extra=extra, **fields)


@dataclass
class ParsedCast:
    """Result of parsing a cast log: ordered events plus decoded annotations."""

    events: list[PlaybackEvent] = field(default_factory=list)
    annotations: list[AnnotationRecord] = field(default_factory=list)
    header: dict[str, Any] | None = None
    skipped_lines: int = 0

    @property
    def max_time(self) -> float:
        if not self.events:
            return 0.0
        return self.events[-1].timestamp

    @property
    def is_empty(self) -> bool:
        return not self.events

    def counts(self) -> dict[str, int]:
        counter = Counter(event.kind for event in self.events)
        return {kind.name.lower(): counter.get(kind, 0) for kind in EventKind}
