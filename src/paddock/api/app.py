"""FastAPI application exposing session resolution, insights and the raw proxy."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from paddock import __version__
from paddock.charts import ChartPublisher, CloudinaryUploader, ImageUploader
from paddock.config import Settings
from paddock.context import RequestContext
from paddock.errors import InvalidRequestError, PaddockError, ResolutionError
from paddock.insights import INSIGHTS, InsightRequest
from paddock.insights.positions import driver_history, running_order
from paddock.openf1 import (
    AsyncOpenF1Client,
    OpenF1APIError,
    OpenF1Error,
    TokenCache,
    TokenProvider,
)
from paddock.proxy import proxy_request
from paddock.resolution import LocationMapCache, ResolvedSession

logger = logging.getLogger(__name__)

USERNAME_HEADER = "openf1-username"
PASSWORD_HEADER = "openf1-password"


def _session_payload(resolved: ResolvedSession) -> dict[str, Any]:
    session = resolved.session
    return {
        "status": "Success",
        "session_key": resolved.session_key,
        "tier": resolved.tier,
        "openf1_resolved_name": {
            "country": session.country_name,
            "session": session.session_name,
        },
        "session_info": session.model_dump(mode="json"),
    }


def create_app(
    settings: Settings | None = None,
    *,
    client: AsyncOpenF1Client | None = None,
    uploader: ImageUploader | None = None,
    token_http: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the service.

    ``client``, ``uploader`` and ``token_http`` default to real instances built
    from ``settings``; tests pass their own.
    """
    settings = settings or Settings.from_env()
    client = client or AsyncOpenF1Client(settings.openf1_base_url, settings.openf1_timeout)
    token_http = token_http or httpx.AsyncClient(timeout=settings.openf1_timeout)
    uploader = uploader or CloudinaryUploader.from_settings(settings)
    charts = ChartPublisher(uploader) if uploader is not None else None
    if charts is None:
        logger.info("No image host configured; chart insights are disabled")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await client.close()
        await token_http.aclose()

    app = FastAPI(title="paddock", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.openf1 = client
    app.state.charts = charts
    app.state.location_cache = LocationMapCache()
    app.state.tokens = TokenProvider(token_http, TokenCache(), settings.openf1_token_url)

    async def request_context(request: Request) -> RequestContext:
        state = request.app.state
        username = state.settings.openf1_username or request.headers.get(USERNAME_HEADER)
        password = state.settings.openf1_password or request.headers.get(PASSWORD_HEADER)
        token = await state.tokens.get_token(username, password)
        return RequestContext.create(
            state.openf1.with_token(token), state.location_cache, state.charts,
        )

    @app.exception_handler(PaddockError)
    async def paddock_error(request: Request, exc: PaddockError) -> JSONResponse:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(OpenF1APIError)
    async def upstream_api_error(request: Request, exc: OpenF1APIError) -> JSONResponse:
        logger.error("OpenF1 answered %s for %s: %s", exc.status_code, request.url.path, exc.message)
        if exc.status_code == 400:
            return JSONResponse(
                status_code=400, content={"error": "OpenF1 rejected parameters. Check filters."},
            )
        return JSONResponse(status_code=502, content={"error": str(exc)})

    @app.exception_handler(OpenF1Error)
    async def upstream_error(request: Request, exc: OpenF1Error) -> JSONResponse:
        logger.error("OpenF1 unavailable for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=502, content={"error": str(exc)})

    @app.get("/")
    async def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": __version__,
            "charts_enabled": app.state.charts is not None,
            "insights": INSIGHTS.keys,
        }

    @app.get("/find_session_key")
    async def find_session_key(
        year: int | None = None,
        location: str | None = None,
        session_type: str | None = None,
        month: str | None = None,
        ctx: RequestContext = Depends(request_context),
    ) -> dict[str, Any]:
        if year is None or not location:
            raise InvalidRequestError("year and location are required")
        resolved = await ctx.sessions.resolve(year, location, session_type, month)
        return _session_payload(resolved)

    @app.get("/raw_data_proxy")
    async def raw_data_proxy(
        request: Request, ctx: RequestContext = Depends(request_context),
    ) -> Any:
        return await proxy_request(
            ctx, request.query_params.get("resource"), request.url.query,
        )

    @app.post("/generate_insight")
    async def generate_insight(
        body: InsightRequest, ctx: RequestContext = Depends(request_context),
    ) -> dict[str, Any]:
        handler_key = INSIGHTS.resolve(body.type)
        if handler_key is None:
            raise ResolutionError(
                f"Unknown insight type {body.type!r}; expected one of {', '.join(INSIGHTS.keys)}"
            )
        year = body.year or settings.default_year
        request = body.model_copy(update={"year": year})

        tier = None
        session_key = body.session_key
        if session_key is None:
            resolved = await ctx.sessions.resolve(
                year, body.location, body.session_type or settings.default_session_type, body.month,
            )
            session_key, tier = resolved.session_key, resolved.tier

        logger.info("Running %s on session %s", handler_key, session_key)
        result = await INSIGHTS.get(handler_key)(ctx, session_key, request)
        return {
            "status": "Success",
            "context": {"session": session_key, "type": handler_key, "tier": tier},
            "result": result,
        }

    @app.get("/drivers")
    async def drivers(
        name: str | None = None,
        limit: int = Query(default=20, ge=1, le=100),
        session_key: str = "latest",
        ctx: RequestContext = Depends(request_context),
    ) -> list[dict[str, Any]]:
        """Session roster, one row per car, optionally narrowed by a name or number."""
        roster = await ctx.client.drivers(session_key=session_key)
        seen: set[int | None] = set()
        rows = []
        for driver in roster:
            if driver.driver_number in seen:
                continue
            seen.add(driver.driver_number)
            if name and not _name_matches(driver.model_dump(), name):
                continue
            rows.append(driver.model_dump(mode="json"))
        return rows[:limit]

    @app.get("/driver-info")
    async def driver_info(
        year: int | None = None,
        location: str | None = None,
        session_type: str | None = None,
        driver: str | None = None,
        ctx: RequestContext = Depends(request_context),
    ) -> dict[str, Any]:
        if year is None or not location or not driver:
            raise InvalidRequestError("year, location and driver are required")
        resolved = await ctx.sessions.resolve(year, location, session_type)
        profile = await ctx.drivers.lookup(resolved.session_key, driver)
        if profile is None:
            raise ResolutionError(f"Driver {driver!r} not found in session {resolved.session_key}")
        return {
            "status": "Success",
            "session_key": resolved.session_key,
            "resolved_driver": {
                "driver_number": profile.driver_number,
                "name": profile.name_acronym,
            },
            "full_profile": profile.model_dump(mode="json"),
        }

    @app.get("/position")
    async def position(
        year: int | None = None,
        location: str | None = None,
        session_type: str | None = None,
        driver: str | None = None,
        ctx: RequestContext = Depends(request_context),
    ) -> Any:
        """Running order of a session, or one driver's lap-by-lap position."""
        resolved = await ctx.sessions.resolve(
            year or settings.default_year,
            location,
            session_type or settings.default_session_type,
        )
        if driver:
            return await driver_history(ctx, resolved.session_key, driver)
        return await running_order(ctx, resolved.session_key)

    return app


def _name_matches(row: dict[str, Any], name: str) -> bool:
    needle = name.strip().lower()
    if str(row.get("driver_number")) == needle:
        return True
    return any(
        needle in str(row.get(field) or "").lower()
        for field in ("full_name", "last_name", "name_acronym", "broadcast_name")
    )
