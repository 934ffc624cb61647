#!/usr/bin/env python3
"""
Run the Steam Market Manager API server.

Usage:
    python run_api.py
    python run_api.py --port 8080
    python run_api.py --host 0.0.0.0 --port 1337
"""

import argparse

import uvicorn

from core.config import Config
from core.constants import WEB_API_HOST_DEFAULT
from core.logging_setup import setup_logging


def main():
    config = Config()

    parser = argparse.ArgumentParser(description="Run Steam Market Manager API server")
    parser.add_argument(
        "--host",
        default=WEB_API_HOST_DEFAULT,
        help=f"Host to bind to (default: {WEB_API_HOST_DEFAULT})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.web_api_port,
        help=f"Port to listen on (default: {config.web_api_port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )

    args = parser.parse_args()
    setup_logging(debug=args.log_level == "debug")

    print(f"Starting Steam Market Manager API on http://{args.host}:{args.port}")
    print(f"API docs: http://{args.host}:{args.port}/docs")
    print()

    # One worker: the refresh gate and cache lock live in-process
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
