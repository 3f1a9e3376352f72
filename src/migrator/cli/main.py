"""CLI entry point for migrator."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from ..core.exceptions import LedgerError, UnitError
from ..core.logs import configure_logging
from ..core.types import MIGRATIONS
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="migrator",
        description="Versioned database migrations and seeders with batch rollback",
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--config", help="Path to migrator.toml (default: MIGRATOR_CONFIG)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=False)

    # init
    init_parser = subparsers.add_parser("init", help="Create a migrator.toml config file")
    init_parser.add_argument(
        "-d", "--dir", default=MIGRATIONS.directory, help="Migrations directory"
    )
    init_parser.add_argument(
        "--seeders-dir", default="seeders", help="Seeders directory"
    )
    init_parser.add_argument("--path", help="Config file path (default: migrator.toml)")

    # create
    new_parser = subparsers.add_parser("create", help="Create a new migration")
    new_parser.add_argument("name", help="Migration name")
    new_parser.add_argument(
        "-t",
        "--template",
        choices=["raw", "table", "alter"],
        default="raw",
        help="Migration template (default: raw)",
    )
    new_parser.add_argument("-d", "--dir", help="Migrations directory")

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Run pending migrations")
    commands.add_connection_arguments(migrate_parser)
    migrate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be migrated without executing",
    )

    # rollback
    rollback_parser = subparsers.add_parser(
        "rollback", help="Roll back migrations of the last batch"
    )
    rollback_parser.add_argument(
        "-s", "--steps", type=int, default=1, help="Number of migrations (default: 1)"
    )
    commands.add_connection_arguments(rollback_parser)
    commands.add_confirm_argument(rollback_parser)

    # status
    status_parser = subparsers.add_parser("status", help="Show migration status")
    commands.add_connection_arguments(status_parser)

    # fresh
    fresh_parser = subparsers.add_parser(
        "fresh", help="Drop all tables and re-run migrations"
    )
    commands.add_connection_arguments(fresh_parser)
    commands.add_confirm_argument(fresh_parser)

    # reset
    reset_parser = subparsers.add_parser("reset", help="Roll back all migrations")
    commands.add_connection_arguments(reset_parser)
    commands.add_confirm_argument(reset_parser)

    # seed
    seed_parser = subparsers.add_parser("seed", help="Manage seeders")
    commands.add_seed_arguments(seed_parser)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.from_env_or_file(args.config)
        configure_logging("DEBUG" if args.debug else config.log_level)

        if args.command == "init":
            commands.handle_init(args, config)
        elif args.command == "create":
            commands.handle_create(args, config, MIGRATIONS)
        elif args.command == "migrate":
            commands.handle_apply(args, config, MIGRATIONS)
        elif args.command == "rollback":
            commands.handle_rollback(args, config, MIGRATIONS)
        elif args.command == "status":
            commands.handle_status(args, config, MIGRATIONS)
        elif args.command == "fresh":
            commands.handle_fresh(args, config, MIGRATIONS)
        elif args.command == "reset":
            commands.handle_reset(args, config, MIGRATIONS)
        elif args.command == "seed":
            commands.handle_seed(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except (UnitError, LedgerError) as e:
        if e.completed:
            print(f"{len(e.completed)} unit(s) completed before the failure:", file=sys.stderr)
            for unit in e.completed:
                print(f"  ✓ {unit.filename}", file=sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        logger.opt(exception=e).debug("Unit failure")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.opt(exception=e).debug("Command failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
