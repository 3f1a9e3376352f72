"""Run the CLI with ``python -m migrator``."""

from .cli.main import main

main()
