"""Command-line interface for LightShuttle."""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

from lightshuttle import __version__


class RootUserError(RuntimeError):
    pass


def check_not_root(uid: int) -> None:
    """Refuse to run the server as uid 0."""
    if uid == 0:
        raise RootUserError("Refusing to run as root.")


def _current_uid() -> int:
    getuid = getattr(os, "getuid", None)
    return getuid() if getuid is not None else -1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the LightShuttle CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = argparse.ArgumentParser(
        prog="lightshuttle",
        description="LightShuttle - container lifecycle management API"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands"
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the API server"
    )
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (default: from BIND_ADDRESS, 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: from BIND_ADDRESS, 7878)"
    )
    serve_parser.add_argument(
        "--allow-root",
        action="store_true",
        help="Allow running as the root user"
    )

    openapi_parser = subparsers.add_parser(
        "openapi",
        help="Print the OpenAPI document"
    )
    openapi_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write to this file instead of stdout"
    )

    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        if not args.allow_root:
            try:
                check_not_root(_current_uid())
            except RootUserError as e:
                print(f"Error: {e} Use --allow-root to override.", file=sys.stderr)
                return 1

        from lightshuttle.main import run

        run(host=args.host, port=args.port)
        return 0

    elif args.command == "openapi":
        from lightshuttle.api.app import create_app

        document = json.dumps(create_app().openapi(), indent=2)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as fh:
                fh.write(document + "\n")
        else:
            print(document)
        return 0

    elif args.command == "version":
        print(f"LightShuttle version {__version__}")
        return 0

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
