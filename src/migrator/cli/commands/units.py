"""Apply, rollback, status, fresh and reset commands, shared by both unit kinds."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ...core.config import Config
from ...core.types import RunResult, StatusReport, UnitKind
from ...engine.lifecycle import UnitManager
from ...store.database import Database


def add_connection_arguments(parser) -> None:
    """Add database and directory options to a subcommand parser.

    Args:
        parser: ArgumentParser to add arguments to.
    """
    parser.add_argument(
        "-c",
        "--database-url",
        help="SQLAlchemy database URL (default: DATABASE_URL or config file)",
    )
    parser.add_argument(
        "-d",
        "--dir",
        help="Directory holding unit files (default: from config)",
    )


def add_confirm_argument(parser) -> None:
    """Add the --confirm flag that skips the interactive prompt."""
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Skip confirmation prompt",
    )


def confirm(message: str, assume_yes: bool = False) -> bool:
    """Ask a yes/no question on stdin; default is no.

    Args:
        message: Question to ask.
        assume_yes: Return True without asking.
    """
    if assume_yes:
        return True
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


@contextmanager
def open_manager(args, config: Config, kind: UnitKind) -> Iterator[UnitManager]:
    """Connect to the database and build a manager for ``kind``.

    Command-line options take precedence over the configuration.
    """
    url = getattr(args, "database_url", None) or config.require_database_url()
    kind = config.kind(kind)
    location = Path(args.dir) if getattr(args, "dir", None) else Path(kind.directory)

    db = Database(url, schema=config.schema)
    db.connect()
    try:
        yield UnitManager(db, kind, location=location)
    finally:
        db.close()


def handle_apply(args, config: Config, kind: UnitKind) -> None:
    """Handle migrate / seed run.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
        kind: Unit kind to apply.
    """
    with open_manager(args, config, kind) as manager:
        if getattr(args, "dry_run", False):
            _print_pending(manager.pending(), kind)
            return

        filename = getattr(args, "file", None)
        if filename:
            result = manager.apply_unit(filename)
        else:
            result = manager.apply_pending()
        _print_result(result, kind, "applied")


def handle_rollback(args, config: Config, kind: UnitKind) -> None:
    """Handle rollback / seed rollback."""
    if not confirm(
        f"Are you sure you want to roll back {args.steps} {kind.label}(s)?",
        args.confirm,
    ):
        print("Rollback cancelled")
        return

    with open_manager(args, config, kind) as manager:
        result = manager.rollback(steps=args.steps)
        _print_result(result, kind, "rolled back")


def handle_reset(args, config: Config, kind: UnitKind) -> None:
    """Handle reset / seed reset."""
    if not confirm(f"This will roll back ALL {kind.plural}. Are you sure?", args.confirm):
        print("Reset cancelled")
        return

    with open_manager(args, config, kind) as manager:
        result = manager.reset()
        _print_result(result, kind, "rolled back")


def handle_fresh(args, config: Config, kind: UnitKind) -> None:
    """Handle fresh: drop all tables and reapply every unit."""
    if not confirm(
        f"This will DROP ALL TABLES and re-run all {kind.plural}. Are you absolutely sure?",
        args.confirm,
    ):
        print("Fresh cancelled")
        return

    with open_manager(args, config, kind) as manager:
        result = manager.fresh()
        _print_result(result, kind, "applied")


def handle_status(args, config: Config, kind: UnitKind) -> None:
    """Handle status / seed status."""
    with open_manager(args, config, kind) as manager:
        _print_status(manager.status(), kind)


def _print_result(result: RunResult, kind: UnitKind, verb: str) -> None:
    if not result.count:
        print(f"Nothing to do: no {kind.plural} {verb}.")
        return

    for unit in result.units:
        print(f"  ✓ {unit.filename}")
    batch = f" (batch {result.batch})" if result.batch is not None else ""
    print(f"{result.count} {kind.label}(s) {verb}{batch}.")


def _print_pending(pending, kind: UnitKind) -> None:
    if not pending:
        print(f"No pending {kind.plural}")
        return

    print(f"Pending {kind.plural} (dry run):")
    for index, unit in enumerate(pending, start=1):
        print(f"  {index}. {unit.filename}")


def _print_status(status: StatusReport, kind: UnitKind) -> None:
    title = f"{kind.label.capitalize()} Status"
    print(title)
    print("=" * 50)

    if status.applied:
        print(f"Applied {kind.plural}:")
        for entry in status.applied:
            executed = f", {entry.executed_at:%Y-%m-%d %H:%M:%S}" if entry.executed_at else ""
            print(f"  ✓ {entry.version} {entry.name} (batch {entry.batch}{executed})")
    else:
        print(f"No applied {kind.plural}")
    print()

    if status.pending:
        print(f"Pending {kind.plural}:")
        for unit in status.pending:
            print(f"  ○ {unit.filename}")
    else:
        print(f"No pending {kind.plural}")
    print()

    print(f"Total applied: {len(status.applied)}")
    print(f"Total pending: {len(status.pending)}")
    if status.is_up_to_date:
        print("Database is up to date.")
