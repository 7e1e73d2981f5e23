"""CLI entry: run the API server.

Usage:
    python -m paddock                  # serve on $PORT (default 3000)
    python -m paddock --port 8000
"""

import argparse
import logging

import uvicorn

from paddock.api import create_app
from paddock.config import Settings


def main() -> None:
    parser = argparse.ArgumentParser(description="OpenF1 insight service")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, help="Port (default: $PORT or 3000)")
    parser.add_argument("--log-level", default="INFO", help="Root log level")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=args.host, port=args.port or settings.port)


if __name__ == "__main__":
    main()
