"""Create the posts table."""

import sqlalchemy as sa

from migrator import BaseMigration


class CreatePosts(BaseMigration):
    def up(self):
        self.op.create_table(
            "posts",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
            sa.Column("title", sa.String(255), nullable=False),
            schema=self.schema,
        )

    def down(self):
        self.op.drop_table("posts", schema=self.schema)
