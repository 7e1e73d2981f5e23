"""HTTP surface of the service."""

from paddock.api.app import create_app

__all__ = ["create_app"]
