"""Global pytest configuration."""

import os

# Set DATABASE_URL for tests before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ORS_API_KEY", "test-ors-key")
