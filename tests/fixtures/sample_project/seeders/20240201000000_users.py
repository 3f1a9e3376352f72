"""Seed the users table."""

from migrator import BaseSeeder

ROWS = [
    {"email": "ada@example.com", "name": "Ada"},
    {"email": "grace@example.com", "name": "Grace"},
]


class UsersSeeder(BaseSeeder):
    def run(self):
        self.insert_or_ignore("users", ROWS)

    def down(self):
        self.execute("DELETE FROM users")
