# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Plain-text rendering of playback frames and agent annotations."""

from __future__ import annotations

import json

from logflix.cast.models import AnnotationRecord
from logflix.playback.derive import PlaybackFrame
from logflix.playback.timeline import format_clock

IDLE_TERMINAL = "No terminal session yet... Press play to start"
IDLE_ANNOTATION = "No agent thinking data yet"

PROGRESS_WIDTH = 40


def _field_title(key: str) -> str:
    return key.replace("_", " ").title()


def _format_timeout(timeout: float) -> str:
    return f"{timeout:g}s timeout"


def annotation_sections(record: AnnotationRecord) -> list[tuple[str, str]]:
    """Ordered ``(title, body)`` pairs describing one annotation."""
    sections: list[tuple[str, str]] = []
    if record.is_task_complete is not None:
        sections.append(("Status", "Task Complete" if record.is_task_complete else "In Progress"))
    if record.state_analysis:
        sections.append(("State Analysis", record.state_analysis))
    if record.explanation:
        sections.append(("Next Actions", record.explanation))
    if record.commands:
        lines = []
        for command in record.commands:
            line = f"$ {command.text or 'Empty command'}"
            if command.timeout:
                line += f"  ({_format_timeout(command.timeout)})"
            lines.append(line)
        sections.append(("Planned Commands", "\n".join(lines)))
    for key, value in record.extra.items():
        body = value if isinstance(value, str) else json.dumps(value, indent=2)
        sections.append((_field_title(key), body))
    if record.raw_content:
        sections.append(("Raw Marker Data", record.raw_content))
    sections.append(("", f"Thinking at {format_clock(record.timestamp)}"))
    return sections


def render_annotation(record: AnnotationRecord | None) -> str:
    if record is None:
        return IDLE_ANNOTATION
    blocks = []
    for title, body in annotation_sections(record):
        blocks.append(f"[{title}]\n{body}" if title else body)
    return "\n\n".join(blocks)


def _progress_bar(frame: PlaybackFrame, width: int = PROGRESS_WIDTH) -> str:
    cells = ["-"] * width
    for marker in frame.markers:
        cells[min(width - 1, int(marker.percent / 100 * width))] = "|"
    filled = min(width, int(frame.progress_percent / 100 * width))
    for i in range(filled):
        if cells[i] == "-":
            cells[i] = "="
    return "[" + "".join(cells) + "]"


def render_header(frame: PlaybackFrame) -> str:
    if frame.is_scrubbing:
        status = "SCRUB"
    else:
        status = "PLAY" if frame.is_playing else "PAUSE"
    parts = [
        f"{status} {frame.speed:g}x",
        f"{frame.elapsed} {_progress_bar(frame)} {frame.total}",
    ]
    if frame.position:
        parts.append(frame.position)
    return "  ".join(parts)


def render_frame(frame: PlaybackFrame, *, show_annotations: bool = True) -> str:
    """Render a whole frame: header, terminal output and annotation panel."""
    out = [render_header(frame), ""]
    out.append(frame.visible_text or IDLE_TERMINAL)
    if show_annotations:
        out.extend(["", "-" * PROGRESS_WIDTH, render_annotation(frame.annotation)])
    return "\n".join(out) + "\n"
