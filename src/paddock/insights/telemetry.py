"""Car telemetry for a single lap, and session weather."""

from __future__ import annotations

import statistics
from dataclasses import dataclass

from paddock.api_logging import log_service_call
from paddock.charts import chart_public_id, line_chart
from paddock.context import RequestContext
from paddock.errors import DataNotFoundError, InvalidRequestError
from paddock.insights.common import require_driver
from paddock.insights.registry import INSIGHTS
from paddock.insights.request import InsightRequest
from paddock.openf1 import Filter
from paddock.openf1.models import CarData, Driver


@dataclass(frozen=True)
class TelemetrySummary:
    driver: str
    lap_number: int
    samples: int
    max_speed_kph: float
    avg_speed_kph: float
    avg_throttle_percent: float | None
    drs_open_samples: int


@dataclass(frozen=True)
class SpeedTrace:
    image_url: str
    samples: int
    data_type: str = "Speed Trace"


@dataclass(frozen=True)
class WeatherChart:
    image_url: str
    samples: int
    max_track_temperature: float | None
    max_air_temperature: float | None
    rain_readings: int
    data_type: str = "Weather Chart"


async def lap_telemetry(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> tuple[Driver, list[CarData]]:
    """Car data samples recorded while the requested driver ran the requested lap."""
    if request.driver_token is None or request.lap_number is None:
        raise InvalidRequestError("Both driver and lap_number are required")
    driver = await require_driver(ctx, session_key, request.driver_token)
    laps = await ctx.client.laps(
        session_key=session_key,
        driver_number=driver.driver_number,
        lap_number=request.lap_number,
    )
    if not laps or laps[0].date_end is None:
        raise DataNotFoundError(
            f"Lap {request.lap_number} not found for {driver.label} in session {session_key}"
        )
    lap = laps[0]
    samples = await ctx.client.car_data(
        session_key=session_key,
        driver_number=driver.driver_number,
        date=Filter(gte=lap.date_start, lte=lap.date_end),
    )
    return driver, samples


@INSIGHTS.register("telemetry_summary")
@log_service_call
async def telemetry_summary(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> TelemetrySummary:
    driver, samples = await lap_telemetry(ctx, session_key, request)
    speeds = [s.speed for s in samples if s.speed is not None]
    if not speeds:
        raise DataNotFoundError(f"No car data for {driver.label} on lap {request.lap_number}")
    throttles = [s.throttle for s in samples if s.throttle is not None]
    return TelemetrySummary(
        driver=driver.label,
        lap_number=request.lap_number,
        samples=len(samples),
        max_speed_kph=round(float(max(speeds)), 1),
        avg_speed_kph=round(statistics.fmean(speeds), 1),
        avg_throttle_percent=round(statistics.fmean(throttles), 1) if throttles else None,
        drs_open_samples=sum(1 for s in samples if s.drs_open),
    )


@INSIGHTS.register("telemetry_chart")
@log_service_call
async def telemetry_chart(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> SpeedTrace:
    charts = ctx.require_charts()
    driver, samples = await lap_telemetry(ctx, session_key, request)
    speeds = [s.speed for s in samples]
    if not any(v is not None for v in speeds):
        raise DataNotFoundError(f"No car data for {driver.label} on lap {request.lap_number}")
    fig = line_chart(
        f"{driver.label} Lap {request.lap_number} Speed",
        {"Speed": speeds},
        x_title="Sample",
        y_title="Speed (km/h)",
        colors={"Speed": "red"},
    )
    url = await charts.publish(
        fig,
        chart_public_id(
            request.year, request.location, driver.label, f"lap{request.lap_number}", "speed",
        ),
    )
    return SpeedTrace(image_url=url, samples=len(samples))


@INSIGHTS.register("weather_chart")
@log_service_call
async def weather_chart(
    ctx: RequestContext, session_key: int, request: InsightRequest,
) -> WeatherChart:
    charts = ctx.require_charts()
    readings = await ctx.client.weather(session_key=session_key)
    if not readings:
        raise DataNotFoundError(f"No weather data for session {session_key}")
    track = [w.track_temperature for w in readings]
    air = [w.air_temperature for w in readings]
    fig = line_chart(
        "Temperatures",
        {"Track Temp": track, "Air Temp": air},
        x_title="Reading",
        y_title="°C",
        colors={"Track Temp": "red", "Air Temp": "skyblue"},
    )
    url = await charts.publish(
        fig, chart_public_id(request.year, request.location, session_key, "weather"),
    )
    return WeatherChart(
        image_url=url,
        samples=len(readings),
        max_track_temperature=max((t for t in track if t is not None), default=None),
        max_air_temperature=max((a for a in air if a is not None), default=None),
        rain_readings=sum(1 for w in readings if w.is_raining),
    )
