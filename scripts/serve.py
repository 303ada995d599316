#!/usr/bin/env python3
"""
Virtual File System Server

This script starts the file system API with uvicorn.
Command-line options override the VFS_* environment variables.

Usage:
    python scripts/serve.py [--host HOST] [--port PORT] [--volumes C:,D:]
                            [--log-level LEVEL] [--print-root]
"""

import argparse
import sys
from typing import List, Optional

import uvicorn
from pydantic import ValidationError

from vfsapi.config import Settings, load_settings
from vfsapi.main import create_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the virtual file system service")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument("--volumes", help="Comma-separated volumes to provision, e.g. C:,D:")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--print-root", action="store_true", help="Show the root line in printed trees")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line overrides applied."""
    settings = load_settings()
    overrides = {}

    if args.volumes:
        overrides["volumes"] = [v.strip() for v in args.volumes.split(",") if v.strip()]
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.print_root:
        overrides["print_root"] = True

    return Settings(**{**settings.model_dump(), **overrides})


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = build_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    print(f"Starting virtual file system on http://{args.host}:{args.port}")
    print(f"  Volumes: {', '.join(settings.volumes)}")
    print()

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
