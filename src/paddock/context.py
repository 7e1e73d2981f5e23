"""Per-request wiring of the OpenF1 client, resolvers and chart publisher."""

from __future__ import annotations

from dataclasses import dataclass

from paddock.charts import ChartPublisher
from paddock.errors import ConfigurationError
from paddock.openf1 import AsyncOpenF1Client
from paddock.resolution import (
    DriverResolver,
    LocationMapCache,
    LocationResolver,
    SessionResolver,
)


@dataclass
class RequestContext:
    """Everything a handler needs for one request.

    ``client`` is already bound to the caller's bearer token (if any). The
    driver resolver memoises rosters, so a context must not outlive its
    request; the location cache it is built from is process-wide.
    """

    client: AsyncOpenF1Client
    locations: LocationResolver
    sessions: SessionResolver
    drivers: DriverResolver
    charts: ChartPublisher | None = None

    @classmethod
    def create(
        cls,
        client: AsyncOpenF1Client,
        location_cache: LocationMapCache,
        charts: ChartPublisher | None = None,
    ) -> RequestContext:
        locations = LocationResolver(client, location_cache)
        return cls(
            client=client,
            locations=locations,
            sessions=SessionResolver(client, locations),
            drivers=DriverResolver(client),
            charts=charts,
        )

    @property
    def authenticated(self) -> bool:
        return self.client.token is not None

    def require_charts(self) -> ChartPublisher:
        if self.charts is None:
            raise ConfigurationError(
                "Chart output needs an image host; set the CLOUDINARY_* variables"
            )
        return self.charts
