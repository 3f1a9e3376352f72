"""Seed one post per user."""


def run(ctx):
    ctx.execute(
        "INSERT INTO posts (user_id, title) "
        "SELECT id, 'Hello from ' || name FROM users ORDER BY id"
    )


def down(ctx):
    ctx.execute("DELETE FROM posts")
