# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ManualTimer:
    when: float
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic stand-in for the event loop's ``call_later``."""

    now: float = 0.0
    timers: list[ManualTimer] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(when=self.now + delay, delay=delay, callback=callback)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_next(self) -> bool:
        pending = self.pending()
        if not pending:
            return False
        timer = min(pending, key=lambda t: t.when)
        self.now = timer.when
        timer.fired = True
        timer.callback()
        return True

    def advance(self, seconds: float) -> None:
        deadline = self.now + seconds
        while True:
            due = [t for t in self.pending() if t.when <= deadline]
            if not due:
                break
            self.fire_next()
        self.now = deadline

    def run_until_idle(self, limit: int = 10_000) -> int:
        fired = 0
        while fired < limit and self.fire_next():
            fired += 1
        return fired


def cast_text(events: list[list[Any]], header: dict[str, Any] | None = None) -> str:
    lines = [json.dumps(header or {"version": 2, "width": 80, "height": 24})]
    lines.extend(json.dumps(event) for event in events)
    return "\n".join(lines) + "\n"


SCENARIO_EVENTS = [
    [0, "o", "hello "],
    [0.5, "o", "world"],
    [1.2, "m", json.dumps({"explanation": "done"})],
]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def scenario_text() -> str:
    """Header, two output chunks and one annotation."""
    return cast_text(SCENARIO_EVENTS)


@pytest.fixture
def three_step_text() -> str:
    return cast_text([[100.0, "o", "a"], [102.0, "o", "b"], [105.0, "o", "c"]])


@pytest.fixture
def cast_root(tmp_path: Path, scenario_text: str) -> Path:
    """Cast root holding a scenario recording and a quick one for live playback."""
    root = tmp_path / "casts"
    root.mkdir()
    (root / "demo.cast").write_text(scenario_text, encoding="utf-8")
    (root / "quick.cast").write_text(
        cast_text([[0, "o", "one\r\n"], [0.01, "o", "two\r\n"], [0.02, "o", "three"]]),
        encoding="utf-8",
    )
    nested = root / "runs"
    nested.mkdir()
    (nested / "task-1.cast").write_text(scenario_text, encoding="utf-8")
    return root
