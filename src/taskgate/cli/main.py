#!/usr/bin/env python3
"""
Taskgate CLI - Main entry point.

Usage:
    taskgate serve [--host H] [--port P] [--reload]   # Run the API server
    taskgate routes                                   # Print the route table
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from ..config import get_settings
from ..core.registry import build_registry
from ..core.errors import RegistryError


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()

    # Fail fast on an incomplete registry before binding the port
    try:
        build_registry()
    except RegistryError as e:
        print(f"Error: {e}")
        return 1

    uvicorn.run(
        "taskgate.service.app:create_app",
        factory=True,
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def cmd_routes(args: argparse.Namespace) -> int:
    """Print the route table."""
    try:
        registry = build_registry()
    except RegistryError as e:
        print(f"Error: {e}")
        return 1

    prefix = get_settings().API_PREFIX
    for route in registry.iter_routes():
        print(f"{route.method:<7} {prefix}{route.path:<60} {route.call_type.value:<5} {route.call_name.value}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="taskgate",
        description="Taskgate - typed call gateway for the TODO service",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_parser.add_argument("--port", "-p", type=int, help="Port (default: PORT setting)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # routes
    subparsers.add_parser("routes", help="Print the route table")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "serve": cmd_serve,
        "routes": cmd_routes,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
