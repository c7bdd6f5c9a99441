"""Root conftest — shared test configuration."""

import os

# Never point tests at a real server database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
