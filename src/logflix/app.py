# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import FastAPI

from logflix import __version__
from logflix.api import cast_routes
from logflix.library import CastLibrary
from logflix.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI app."""
    settings = settings or Settings()
    app = FastAPI(title="LogFlix", version=__version__)
    app.state.settings = settings

    library = CastLibrary(settings.cast_root)
    app.include_router(
        cast_routes.setup(library, speed=settings.default_speed, min_tick_ms=settings.min_tick_ms)
    )

    @app.get("/health")
    async def health():
        return {"status": "ok", "cast_root": str(settings.cast_root)}

    return app


__all__ = ["create_app"]
