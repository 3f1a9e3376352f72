"""Command-line interface for migrator."""
