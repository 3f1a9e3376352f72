"""Index posts by title."""


def up(ctx):
    ctx.op.create_index("ix_posts_title", "posts", ["title"])


def down(ctx):
    ctx.op.drop_index("ix_posts_title", table_name="posts")
