"""FastAPI application serving the market dashboard and its JSON API."""

from __future__ import annotations

import asyncio
import logging
import math
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ..config import AppSettings
from ..dashboard import DashboardController, RefreshTrigger

logger = logging.getLogger(__name__)


def format_number(value: Any) -> str:
    """Two-decimal, comma-grouped rendering; ``-`` for missing values."""

    if value is None:
        return "-"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "-"
    if math.isnan(number):
        return "-"
    return f"{number:,.2f}"


def format_signed(value: Any) -> str:
    text = format_number(value)
    if text != "-" and float(value) > 0:
        return f"+{text}"
    return text


class AutoRefreshRequest(BaseModel):
    enabled: bool


def create_app(
        controller: DashboardController | None = None,
        *,
        settings: AppSettings | None = None,
        templates_dir: Path | None = None,
        run_background: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    With ``run_background`` the app performs one explicit refresh at startup
    and runs the silent auto-refresh loop until shutdown.
    """

    root = Path(__file__).resolve().parent
    templates_path = templates_dir or (root / "templates")
    dashboard = controller or DashboardController(settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        stop_event = asyncio.Event()
        tasks: list[asyncio.Task] = []
        if run_background:
            tasks.append(asyncio.create_task(dashboard.refresh(RefreshTrigger.EXPLICIT)))
            tasks.append(asyncio.create_task(dashboard.run_auto_refresh(stop_event)))
        try:
            yield
        finally:
            stop_event.set()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            dashboard.close()

    app = FastAPI(title="StockTW Market Dashboard", version="0.1.0", lifespan=lifespan)
    templates = Jinja2Templates(directory=str(templates_path))
    templates.env.filters["format_number"] = format_number
    templates.env.filters["format_signed"] = format_signed

    app.state.dashboard = dashboard

    @app.get("/", response_class=HTMLResponse)
    async def render_index(request: Request) -> HTMLResponse:
        payload = dashboard.series_payload()
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "series": payload["series"],
                "latest": payload["latest"],
                "status": dashboard.status(),
            },
        )

    @app.get("/api/series", response_class=JSONResponse)
    async def get_series() -> JSONResponse:
        return JSONResponse(dashboard.series_payload())

    @app.get("/api/status", response_class=JSONResponse)
    async def get_status() -> JSONResponse:
        return JSONResponse(dashboard.status())

    @app.post("/api/refresh", response_class=JSONResponse)
    async def trigger_refresh() -> JSONResponse:
        outcome = await dashboard.refresh(RefreshTrigger.EXPLICIT)
        return JSONResponse({"outcome": outcome.to_dict(), "status": dashboard.status()})

    @app.post("/api/auto-refresh", response_class=JSONResponse)
    async def toggle_auto_refresh(payload: AutoRefreshRequest) -> JSONResponse:
        enabled = dashboard.set_auto_refresh(payload.enabled)
        return JSONResponse({"auto_refresh": enabled})

    return app
