"""Project setup commands: init and create."""

from pathlib import Path

from ...core.config import DEFAULT_CONFIG_FILE, Config, write_default_config
from ...core.types import UnitKind
from ...units.scaffold import create_unit


def handle_init(args, config: Config) -> None:
    """Handle init: write a starter config file and unit directories.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    path = write_default_config(
        args.path or DEFAULT_CONFIG_FILE,
        migrations_dir=args.dir,
        seeders_dir=args.seeders_dir,
    )
    print(f"✓ Created {path}")
    print(f"  Migrations directory: {args.dir}")
    print(f"  Seeders directory: {args.seeders_dir}")


def handle_create(args, config: Config, kind: UnitKind) -> None:
    """Handle create / seed create.

    Args:
        args: Parsed command arguments with name and template.
        config: Application configuration.
        kind: Unit kind to create.
    """
    kind = config.kind(kind)
    directory = Path(args.dir) if getattr(args, "dir", None) else Path(kind.directory)
    path = create_unit(kind, args.name, directory=directory, template=args.template)
    print(f"✓ Created {kind.label}: {path}")
