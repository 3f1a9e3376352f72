"""Generate new unit files from templates."""

import re
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from ..core.types import MIGRATIONS, SEEDERS, UnitKind

_TABLE_PREFIX = re.compile(r"^(create|add|alter|drop)_")

_MIGRATION_TEMPLATES = {
    "raw": '''"""{title}."""

from migrator import BaseMigration


class {class_name}(BaseMigration):
    def up(self):
        self.execute("-- Your SQL here")

    def down(self):
        self.execute("-- Your rollback SQL here")
''',
    "table": '''"""Create the {table} table."""

import sqlalchemy as sa

from migrator import BaseMigration


class {class_name}(BaseMigration):
    def up(self):
        self.op.create_table(
            "{table}",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("created_at", sa.DateTime, server_default=sa.func.current_timestamp()),
            sa.Column("updated_at", sa.DateTime, server_default=sa.func.current_timestamp()),
            schema=self.schema,
        )

    def down(self):
        self.op.drop_table("{table}", schema=self.schema)
''',
    "alter": '''"""Alter the {table} table."""

import sqlalchemy as sa

from migrator import BaseMigration


class {class_name}(BaseMigration):
    def up(self):
        # self.op.add_column("{table}", sa.Column("new_column", sa.String(255)))
        pass

    def down(self):
        # self.op.drop_column("{table}", "new_column")
        pass
''',
}

_SEEDER_TEMPLATES = {
    "basic": '''"""{title}."""

from migrator import BaseSeeder


class {class_name}(BaseSeeder):
    def run(self):
        # self.insert_or_ignore("users", [{{"name": "Jane", "email": "jane@example.com"}}])
        pass

    def down(self):
        pass
''',
    "table": '''"""Seed the {table} table."""

import sqlalchemy as sa

from migrator import BaseSeeder

ROWS = [
    # {{"column1": "value1", "column2": "value2"}},
]


class {class_name}(BaseSeeder):
    def run(self):
        if self.count("{table}") > 0:
            return
        self.insert_or_ignore("{table}", ROWS)

    def down(self):
        self.execute(sa.delete(sa.table("{table}", schema=self.schema)))
''',
}

TEMPLATES: dict[str, dict[str, str]] = {
    MIGRATIONS.label: _MIGRATION_TEMPLATES,
    SEEDERS.label: _SEEDER_TEMPLATES,
}

DEFAULT_TEMPLATE = {
    MIGRATIONS.label: "raw",
    SEEDERS.label: "basic",
}


def clean_name(name: str) -> str:
    """Lowercase and reduce a unit name to ``[a-z0-9_]``."""
    cleaned = re.sub(r"[^a-z0-9_]", "_", name.lower())
    cleaned = re.sub(r"_+", "_", cleaned)
    return cleaned.strip("_")


def class_name_for(name: str, kind: UnitKind) -> str:
    """PascalCase class name, e.g. ``create_users`` -> ``CreateUsers``."""
    words = [word for word in name.split("_") if word]
    class_name = "".join(word.capitalize() for word in words) or kind.label.capitalize()
    if class_name[0].isdigit():
        class_name = f"{kind.label.capitalize()}{class_name}"
    if kind.label == SEEDERS.label and not class_name.endswith("Seeder"):
        class_name += "Seeder"
    return class_name


def create_unit(
    kind: UnitKind,
    name: str,
    directory: Path | str | None = None,
    template: str | None = None,
    now: datetime | None = None,
) -> Path:
    """Write a new unit file named ``<YYYYMMDDHHMMSS>_<name>.py``.

    Args:
        kind: Unit kind to create.
        name: Free-form unit name, cleaned to ``[a-z0-9_]``.
        directory: Target directory (created if missing), default from kind.
        template: Template name; defaults to ``raw`` / ``basic``.
        now: Timestamp for the version, defaults to current UTC time.

    Returns:
        Path of the created file.

    Raises:
        ValueError: If the name is empty after cleaning or the template is unknown.
        FileExistsError: If the target file already exists.
    """
    templates = TEMPLATES.get(kind.label, _MIGRATION_TEMPLATES)
    template = template or DEFAULT_TEMPLATE.get(kind.label, "raw")
    if template not in templates:
        choices = ", ".join(sorted(templates))
        raise ValueError(f"Unknown {kind.label} template {template!r} (choose from {choices})")

    cleaned = clean_name(name)
    if not cleaned:
        raise ValueError(f"Invalid {kind.label} name: {name!r}")

    timestamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    target_dir = Path(directory if directory is not None else kind.directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{timestamp}_{cleaned}.py"
    if path.exists():
        raise FileExistsError(f"{kind.label.capitalize()} file already exists: {path}")

    table = _TABLE_PREFIX.sub("", cleaned) if kind.label == MIGRATIONS.label else cleaned
    content = templates[template].format(
        title=cleaned.replace("_", " ").capitalize(),
        class_name=class_name_for(cleaned, kind),
        table=table,
    )
    path.write_text(content, encoding="utf-8")
    logger.info(f"Created {kind.label} {path}")
    return path
