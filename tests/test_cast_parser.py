# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the cast log parser."""

from __future__ import annotations

import json
from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

from logflix.cast import EventKind, load_cast, parse_cast

from .conftest import cast_text


def test_scenario_parses_header_events_and_annotation(scenario_text: str) -> None:
    cast = parse_cast(scenario_text)

    assert cast.header == {"version": 2, "width": 80, "height": 24}
    assert [e.kind for e in cast.events] == [EventKind.OUTPUT, EventKind.OUTPUT, EventKind.ANNOTATION]
    assert [e.timestamp for e in cast.events] == [0.0, 0.5, 1.2]
    assert cast.max_time == 1.2
    assert len(cast.annotations) == 1
    assert cast.annotations[0].explanation == "done"
    assert cast.annotations[0].timestamp == 1.2


def test_empty_input_yields_empty_cast() -> None:
    for text in ("", "\n\n", "   \n"):
        cast = parse_cast(text)
        assert cast.events == []
        assert cast.annotations == []
        assert cast.max_time == 0.0
        assert cast.is_empty


def test_first_event_sets_zero_point() -> None:
    cast = parse_cast(cast_text([[1700000000.5, "o", "x"], [1700000003.0, "o", "y"]]))
    assert cast.events[0].timestamp == 0.0
    assert cast.events[1].timestamp == 2.5


def test_malformed_line_is_skipped() -> None:
    """Line 2 of 5 is not JSON; the other four still parse."""
    lines = [
        json.dumps([0, "o", "a"]),
        '[1, "o", "b"',
        json.dumps([2, "o", "c"]),
        json.dumps([3, "i", "ls\r"]),
        json.dumps([4, "o", "d"]),
    ]
    cast = parse_cast("\n".join(lines))
    assert len(cast.events) == 4
    assert cast.skipped_lines == 1


def test_non_event_shapes_are_discarded() -> None:
    lines = [
        json.dumps({"not": "a header"}),
        json.dumps([0, "o"]),
        json.dumps("string"),
        json.dumps(42),
        json.dumps(["soon", "o", "bad timestamp"]),
        json.dumps([True, "o", "bool timestamp"]),
        json.dumps([1, "r", "80x24"]),
        json.dumps([1, "o", {"not": "text"}]),
        json.dumps([2, "o", "kept", "extra element"]),
    ]
    cast = parse_cast("\n".join(lines))
    assert [e.payload for e in cast.events] == ["kept"]
    assert cast.events[0].timestamp == 0.0
    assert cast.skipped_lines == 8


def test_non_finite_timestamp_is_skipped() -> None:
    cast = parse_cast('[NaN, "o", "x"]\n[Infinity, "o", "y"]\n[1, "o", "z"]')
    assert [e.payload for e in cast.events] == ["z"]


def test_out_of_order_timestamps_are_clamped() -> None:
    cast = parse_cast(cast_text([[10, "o", "a"], [12, "o", "b"], [11, "o", "c"], [12, "o", "d"], [9, "o", "e"]]))
    assert [e.timestamp for e in cast.events] == [0.0, 2.0, 2.0, 2.0, 2.0]


def test_annotation_with_undecodable_payload_falls_back_to_raw() -> None:
    cast = parse_cast(cast_text([[0, "o", "a"], [1, "m", "not json {"], [2, "o", "b"]]))
    record = cast.annotations[0]
    assert record.raw_content == "not json {"
    assert record.explanation is None
    assert record.extra == {}
    assert [e.payload for e in cast.events if e.kind is EventKind.OUTPUT] == ["a", "b"]


def test_annotation_decoding_to_non_object_keeps_raw_string() -> None:
    cast = parse_cast(cast_text([[0, "m", "[1, 2]"]]))
    assert cast.annotations[0].raw_content == "[1, 2]"


def test_annotation_object_payload_is_accepted() -> None:
    cast = parse_cast(cast_text([[0, "m", {"state_analysis": "looking", "is_task_complete": False}]]))
    record = cast.annotations[0]
    assert record.state_analysis == "looking"
    assert record.is_task_complete is False
    assert json.loads(cast.events[0].payload) == {"state_analysis": "looking", "is_task_complete": False}


def test_annotation_fields_and_extras() -> None:
    payload = {
        "state_analysis": "Tests are failing",
        "explanation": "Fix the import",
        "commands": [
            "ls",
            {"keystrokes": "pytest -q\n", "timeout_sec": 30},
            {"cmd": "make", "max_timeout_sec": 5.5},
            {"duration": 1},
        ],
        "is_task_complete": False,
        "confidence": 0.8,
        "notes": ["a", "b"],
        "explanation_extra": None,
    }
    cast = parse_cast(cast_text([[0, "m", json.dumps(payload)]]))
    record = cast.annotations[0]

    assert record.state_analysis == "Tests are failing"
    assert record.explanation == "Fix the import"
    assert [c.text for c in record.commands] == ["ls", "pytest -q\n", "make", "Unknown command format: duration"]
    assert [c.timeout for c in record.commands] == [None, 30.0, 5.5, None]
    assert list(record.extra) == ["confidence", "notes", "explanation_extra"]
    assert record.raw_content is None


def test_annotation_wrongly_typed_known_fields_move_to_extra() -> None:
    cast = parse_cast(cast_text([[0, "m", json.dumps({"explanation": 3, "is_task_complete": "yes"})]]))
    record = cast.annotations[0]
    assert record.explanation is None
    assert record.is_task_complete is None
    assert record.extra == {"explanation": 3, "is_task_complete": "yes"}


def test_load_cast_reads_file(tmp_path: Path, scenario_text: str) -> None:
    path = tmp_path / "session.cast"
    path.write_text(scenario_text, encoding="utf-8")
    cast = load_cast(path)
    assert len(cast.events) == 3


@given(st.text())
def test_parser_is_total(text: str) -> None:
    parse_cast(text)


@given(
    st.lists(
        st.floats(min_value=-1e6, max_value=1e9, allow_nan=False, allow_infinity=False),
        min_size=1,
        max_size=30,
    )
)
def test_zero_point_and_non_negative_timestamps(stamps: list[float]) -> None:
    cast = parse_cast("\n".join(json.dumps([ts, "o", "x"]) for ts in stamps))
    times = [e.timestamp for e in cast.events]
    assert times[0] == 0.0
    assert all(t >= 0 for t in times)
    assert times == sorted(times)
