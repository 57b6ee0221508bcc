"""Root conftest — shared test configuration."""

import os

# Settings are read at import time by travelcrm.main; keep tests off real databases
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
