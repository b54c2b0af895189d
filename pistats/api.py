"""FastAPI application exposing the latest host statistics."""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .service import SnapshotQuery, StatsRuntime

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    query: Optional[SnapshotQuery] = None,
    runtime: Optional[StatsRuntime] = None,
) -> FastAPI:
    """Build the app around ``query``, or around a fresh runtime when omitted.

    When a runtime is given (or built), its scheduler runs for the lifespan
    of the application.
    """
    if query is None:
        runtime = runtime or StatsRuntime()
        query = runtime.query

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if runtime is not None:
            runtime.start()
        try:
            yield
        finally:
            if runtime is not None:
                runtime.stop()

    app = FastAPI(
        title="Pi Stats Service",
        description="Host telemetry collector serving the latest metrics snapshot.",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/stats", summary="Return the latest host metrics snapshot", tags=["stats"])
    def stats():
        return query.get_latest_payload()

    # Alias for dashboards polling /api/stats.
    app.add_api_route("/api/stats", stats, methods=["GET"], include_in_schema=False)

    @app.get("/health", summary="Service health check", tags=["stats"])
    def health():
        return {"status": "ok"}

    # Must stay last: routes registered above match before the static mount.
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="dashboard")

    return app
