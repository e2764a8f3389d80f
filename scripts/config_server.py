#!/usr/bin/env python3
"""Launch the stagetime configuration service."""

from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for the service.")
    parser.add_argument("--port", type=int, default=8080, help="Port to expose.")
    parser.add_argument(
        "--config",
        help="Reporter config file to serve and update (sets STAGETIME_CONFIG).",
    )
    parser.add_argument(
        "--cors",
        help="Comma separated origins allowed to call the service (sets STAGETIME_CONFIG_CORS).",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (only for local development).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    # Read when the app module is imported, so they must be set before uvicorn loads it.
    if args.config:
        os.environ["STAGETIME_CONFIG"] = args.config
    if args.cors:
        os.environ["STAGETIME_CONFIG_CORS"] = args.cors
    uvicorn.run(
        "stagetime.service.config_api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
