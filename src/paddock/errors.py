"""Service-level error taxonomy.

Every error carries the HTTP status the API layer answers with. Upstream
failures stay as :class:`paddock.openf1.OpenF1Error` and are mapped separately.
"""

from __future__ import annotations


class PaddockError(Exception):
    """Base exception for resolution and insight failures."""

    status_code = 500


class InvalidRequestError(PaddockError):
    """Required input is missing or malformed."""

    status_code = 400


class AuthenticationRequiredError(PaddockError):
    """The resource needs an OpenF1 bearer token and none was available."""

    status_code = 401


class ResolutionError(PaddockError):
    """A location, session, driver or insight type could not be resolved."""

    status_code = 404


class DataNotFoundError(PaddockError):
    """Upstream returned no data where a result is mandatory."""

    status_code = 404


class ConfigurationError(PaddockError):
    """A collaborator (e.g. the image host) is not configured."""

    status_code = 503
