# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from logflix.defaults import SUPPORTED_SPEEDS
from logflix.logging import configure_logging
from logflix.playback.exceptions import PlaybackError
from logflix.settings import Settings

_SPEED_CHOICES = [f"{speed:g}" for speed in SUPPORTED_SPEEDS]


def _load(path: str):
    from logflix.cast.parser import load_cast

    try:
        return load_cast(path)
    except OSError as exc:
        raise click.ClickException(f"Cannot read cast {path}: {exc}") from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Override LOGFLIX_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """logflix command line interface."""
    settings = Settings()
    if log_level:
        settings.log_level = log_level
    configure_logging(settings)
    ctx.obj = settings


@cli.command("serve")
@click.option("--host", default=None, help="Bind host (defaults to LOGFLIX_HOST).")
@click.option("--port", type=int, default=None, help="Bind port (defaults to LOGFLIX_PORT).")
@click.option("--cast-root", type=click.Path(file_okay=False, path_type=str), default=None)
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None, cast_root: str | None) -> None:
    """Serve the playback API over HTTP and WebSocket."""
    import uvicorn

    from logflix.app import create_app

    if cast_root:
        settings.cast_root = Path(cast_root)
    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@cli.group("replay")
def replay_group() -> None:
    """Replay tools."""


@replay_group.command("view")
@click.argument("cast", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--speed", type=click.Choice(_SPEED_CHOICES), default=None, help="Playback speed multiplier.")
@click.option("--start", "start_at", type=float, default=0.0, show_default=True, help="Start offset in seconds.")
@click.option("--clear/--no-clear", default=True, show_default=True)
@click.option("--annotations/--no-annotations", default=True, show_default=True)
@click.pass_obj
def replay_view(
    settings: Settings,
    cast: str,
    speed: str | None,
    start_at: float,
    clear: bool,
    annotations: bool,
) -> None:
    """Replay a cast file in the terminal at recorded pace."""
    from logflix.replay.viewer import replay_cast

    try:
        asyncio.run(
            replay_cast(
                cast,
                speed=float(speed) if speed else settings.default_speed,
                clear=clear,
                show_annotations=annotations,
                start_at=start_at,
                min_tick_ms=settings.min_tick_ms,
            )
        )
    except (PlaybackError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


@replay_group.command("frame")
@click.argument("cast", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--at", "at", type=float, default=None, help="Seconds into the session (default: end).")
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.option("--annotations/--no-annotations", default=True, show_default=True)
def replay_frame(cast: str, at: float | None, as_json: bool, annotations: bool) -> None:
    """Print the session as it looks at a point in time."""
    from logflix.playback.clock import PlaybackState
    from logflix.playback.derive import build_frame
    from logflix.playback.timeline import build_markers
    from logflix.replay.render import render_frame

    parsed = _load(cast)
    t = parsed.max_time if at is None else max(0.0, min(parsed.max_time, at))
    frame = build_frame(parsed, build_markers(parsed), PlaybackState(virtual_time=t))
    if as_json:
        click.echo(json.dumps(frame.model_dump(mode="json"), indent=2))
        return
    click.echo(render_frame(frame, show_annotations=annotations), nl=False)


@replay_group.command("markers")
@click.argument("cast", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
def replay_markers(cast: str, as_json: bool) -> None:
    """List timeline markers."""
    from logflix.playback.timeline import build_markers, format_clock

    markers = build_markers(_load(cast))
    if as_json:
        click.echo(json.dumps([{"timestamp": m.timestamp, "kind": m.kind.value} for m in markers]))
        return
    if not markers:
        click.echo("No markers.")
        return
    for index, marker in enumerate(markers):
        click.echo(f"{index:>3}  {format_clock(marker.timestamp):>6}  {marker.timestamp:10.3f}  {marker.kind.value}")


@replay_group.command("annotations")
@click.argument("cast", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
def replay_annotations(cast: str, as_json: bool) -> None:
    """Print every agent annotation in the session."""
    from logflix.replay.render import render_annotation

    records = _load(cast).annotations
    if as_json:
        click.echo(json.dumps([record.model_dump(mode="json") for record in records], indent=2))
        return
    if not records:
        click.echo("No agent annotations.")
        return
    for record in records:
        click.echo(render_annotation(record))
        click.echo("")


def main() -> None:
    cli.main()


if __name__ == "__main__":
    main()
