"""Seeder commands for migrator CLI."""

from ...core.config import Config
from ...core.types import SEEDERS
from .setup import handle_create
from .units import (
    add_confirm_argument,
    add_connection_arguments,
    handle_apply,
    handle_reset,
    handle_rollback,
    handle_status,
)


def add_seed_arguments(seed_parser) -> None:
    """Add seed subcommands to the seed parser.

    Args:
        seed_parser: ArgumentParser of the ``seed`` command.
    """
    seed_subparsers = seed_parser.add_subparsers(dest="seed_cmd", required=True)

    run_parser = seed_subparsers.add_parser("run", help="Run pending seeders")
    run_parser.add_argument("file", nargs="?", help="Run only this seeder file")
    add_connection_arguments(run_parser)

    rollback_parser = seed_subparsers.add_parser(
        "rollback", help="Roll back the last batch of seeders"
    )
    rollback_parser.add_argument(
        "-s", "--steps", type=int, default=1, help="Number of seeders (default: 1)"
    )
    add_connection_arguments(rollback_parser)
    add_confirm_argument(rollback_parser)

    status_parser = seed_subparsers.add_parser("status", help="Show seeder status")
    add_connection_arguments(status_parser)

    reset_parser = seed_subparsers.add_parser("reset", help="Roll back all seeders")
    add_connection_arguments(reset_parser)
    add_confirm_argument(reset_parser)

    create_parser = seed_subparsers.add_parser("create", help="Create a new seeder")
    create_parser.add_argument("name", help="Seeder name")
    create_parser.add_argument(
        "-t",
        "--template",
        choices=["basic", "table"],
        default="basic",
        help="Seeder template (default: basic)",
    )
    create_parser.add_argument("-d", "--dir", help="Seeders directory")


def handle_seed(args, config: Config) -> None:
    """Handle seed subcommands.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    if args.seed_cmd == "run":
        handle_apply(args, config, SEEDERS)
    elif args.seed_cmd == "rollback":
        handle_rollback(args, config, SEEDERS)
    elif args.seed_cmd == "status":
        handle_status(args, config, SEEDERS)
    elif args.seed_cmd == "reset":
        handle_reset(args, config, SEEDERS)
    elif args.seed_cmd == "create":
        handle_create(args, config, SEEDERS)
