"""Create the users table."""

import sqlalchemy as sa

from migrator import BaseMigration


class CreateUsers(BaseMigration):
    def up(self):
        self.op.create_table(
            "users",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("email", sa.String(255), nullable=False, unique=True),
            sa.Column("name", sa.String(255)),
            schema=self.schema,
        )

    def down(self):
        self.op.drop_table("users", schema=self.schema)
