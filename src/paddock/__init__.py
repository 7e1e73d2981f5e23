"""paddock: session resolution and race insights over the OpenF1 API."""

from paddock.config import Settings
from paddock.errors import (
    AuthenticationRequiredError,
    ConfigurationError,
    DataNotFoundError,
    InvalidRequestError,
    PaddockError,
    ResolutionError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationRequiredError",
    "ConfigurationError",
    "DataNotFoundError",
    "InvalidRequestError",
    "PaddockError",
    "ResolutionError",
    "Settings",
    "__version__",
]
