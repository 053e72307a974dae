"""
Uvicorn launcher for the DevHub gateway.

Usage:
  python -m devhub_gateway.main [--host 0.0.0.0] [--port 8080]
                                [--reload] [--log-level info]

Defaults come from the environment (HOST, PORT, LOG_LEVEL) via config.
"""

from __future__ import annotations

import argparse
from typing import Optional

import uvicorn

from .config import load_config
from .logging import get_logger, setup_logging


def serve(host: str, port: int, *, reload: bool = False, log_level: str = "info", log_format: str = "json") -> None:
    setup_logging(level=log_level.upper(), log_format=log_format)
    get_logger(__name__).info("server_starting", host=host, port=port)
    # Factory import string so --reload re-creates the app in the child process.
    uvicorn.run(
        "devhub_gateway.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
        log_config=None,  # keep the structlog handlers installed above
        proxy_headers=True,
    )


def main(argv: Optional[list[str]] = None) -> None:
    cfg = load_config()

    parser = argparse.ArgumentParser(description="Run the DevHub gateway (uvicorn)")
    parser.add_argument("--host", default=cfg.host, help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=cfg.port, help="Port (default: %(default)s)")
    parser.add_argument("--reload", action="store_true", help="Enable autoreload (dev only)")
    parser.add_argument("--log-level", default=cfg.log_level, help="Log level (default: %(default)s)")
    args = parser.parse_args(argv)

    serve(args.host, args.port, reload=args.reload, log_level=args.log_level, log_format=cfg.log_format)


if __name__ == "__main__":
    main()
