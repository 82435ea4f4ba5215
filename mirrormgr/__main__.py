from __future__ import annotations

import argparse

import uvicorn

from mirrormgr.api.app import create_app
from mirrormgr.core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Mirror job manager API server")
    parser.add_argument("--host", default=settings.api_host, help=f"Bind address (default: {settings.api_host})")
    parser.add_argument("--port", type=int, default=settings.api_port, help=f"Port (default: {settings.api_port})")
    parser.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
    )
    args = parser.parse_args()

    # The app lifespan configures logging from the cached settings.
    settings.log_level = args.log_level.upper()
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
