"""CLI entry point for sqlmigrate."""

import argparse
import sys
from typing import NoReturn, Optional

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="sqlmigrate",
        description="Apply versioned SQL migrations and detect drift in applied ones",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=False)

    migrate_parser = subparsers.add_parser(
        "migrate", help="Apply all pending migrations"
    )
    commands.add_backend_arguments(migrate_parser)
    migrate_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Validate and list pending migrations without applying them",
    )

    status_parser = subparsers.add_parser(
        "status", help="Show applied, pending and modified migrations"
    )
    commands.add_backend_arguments(status_parser)

    return parser


def configure_logging(verbose: bool = False) -> None:
    """Route log output to stderr at the requested level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<level>{level: <8}</level> {message}",
    )


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = commands.apply_overrides(args, Config.from_env())

        if args.command == "migrate":
            commands.handle_migrate(args, config)
        elif args.command == "status":
            commands.handle_status(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
