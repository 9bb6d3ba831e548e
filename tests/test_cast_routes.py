# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from logflix.app import create_app
from logflix.settings import Settings


def _recv_until(ws, predicate, max_msgs: int = 50) -> dict:
    for _ in range(max_msgs):
        msg = json.loads(ws.receive_text())
        if predicate(msg):
            return msg
    raise AssertionError("expected message not received")


@pytest.fixture
def client(cast_root: Path):
    app = create_app(Settings(cast_root=cast_root, default_speed=4.0, min_tick_ms=1))
    with TestClient(app) as client:
        yield client


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.json()["status"] == "ok"


def test_list_casts(client: TestClient) -> None:
    assert client.get("/casts").json() == {"casts": ["demo", "quick", "runs/task-1"]}


def test_cast_summary(client: TestClient) -> None:
    summary = client.get("/casts/demo").json()
    assert summary["duration"] == 1.2
    assert summary["duration_label"] == "0:01"
    assert summary["counts"] == {"input": 0, "output": 2, "annotation": 1}
    assert summary["width"] == 80
    assert summary["markers"] == [{"timestamp": 1.2, "kind": "annotation"}]


def test_nested_cast_summary(client: TestClient) -> None:
    assert client.get("/casts/runs/task-1").json()["id"] == "runs/task-1"


def test_missing_cast_is_404(client: TestClient) -> None:
    resp = client.get("/casts/nope")
    assert resp.status_code == 404
    assert "nope" in resp.json()["error"]


def test_traversal_is_rejected(client: TestClient) -> None:
    resp = client.get("/casts/runs/../../secret/frame")
    assert resp.status_code in (400, 404)


def test_frame_at_time(client: TestClient) -> None:
    frame = client.get("/casts/demo/frame", params={"t": 1.2}).json()
    assert frame["visible_text"] == "hello world"
    assert frame["annotation"]["explanation"] == "done"
    assert frame["position"] == "Action 1 of 1"

    early = client.get("/casts/demo/frame", params={"t": 0.1}).json()
    assert early["visible_text"] == "hello"
    assert early["annotation"] is None

    clamped = client.get("/casts/demo/frame", params={"t": 99}).json()
    assert clamped["virtual_time"] == 1.2


def test_ws_controls(client: TestClient) -> None:
    with client.websocket_connect("/ws/casts/demo/play") as ws:
        initial = _recv_until(ws, lambda m: m["type"] == "frame")
        assert initial["visible_text"] == "hello"
        assert initial["speed"] == 4.0

        ws.send_text(json.dumps({"type": "seek", "t": 1.2}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["visible_text"] == "hello world"
        assert frame["annotation"]["explanation"] == "done"

        ws.send_text(json.dumps({"type": "speed", "value": 3}))
        err = _recv_until(ws, lambda m: True)
        assert err["type"] == "error"
        assert "Unsupported speed" in err["message"]

        ws.send_text("not json")
        assert _recv_until(ws, lambda m: True)["type"] == "error"

        ws.send_text(json.dumps({"type": "rewind"}))
        assert "Unknown command" in _recv_until(ws, lambda m: True)["message"]

        ws.send_text(json.dumps({"type": "seek_marker", "index": 5}))
        assert _recv_until(ws, lambda m: True)["type"] == "error"

        ws.send_text('{"type": "seek_marker", "index": 1e999}')
        assert _recv_until(ws, lambda m: True)["type"] == "error"

        ws.send_text("[" * 100_000 + "]" * 100_000)
        assert _recv_until(ws, lambda m: True)["type"] == "error"

        ws.send_text(json.dumps({"type": "seek", "t": 1.2}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["visible_text"] == "hello world"

        ws.send_text(json.dumps({"type": "reset"}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["virtual_time"] == 0.0

        ws.send_text(json.dumps({"type": "scrub_start"}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["is_scrubbing"] is True

        ws.send_text(json.dumps({"type": "scrub_end"}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["is_scrubbing"] is False
        assert frame["is_playing"] is False

        ws.send_text(json.dumps({"type": "pause"}))
        frame = _recv_until(ws, lambda m: m["type"] == "frame")
        assert frame["is_playing"] is False


def test_ws_live_playback_reaches_end(client: TestClient) -> None:
    with client.websocket_connect("/ws/casts/quick/play") as ws:
        _recv_until(ws, lambda m: m["type"] == "frame")
        ws.send_text(json.dumps({"type": "play"}))
        _recv_until(ws, lambda m: m["type"] == "frame" and m["is_playing"])
        final = _recv_until(ws, lambda m: m["type"] == "frame" and not m["is_playing"])
        assert final["virtual_time"] == 0.02
        assert final["visible_text"] == "one\ntwo\nthree"


def test_ws_missing_cast(client: TestClient) -> None:
    with client.websocket_connect("/ws/casts/missing/play") as ws:
        msg = json.loads(ws.receive_text())
        assert msg["type"] == "error"
