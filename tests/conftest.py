"""Test environment: must run before app.* is imported (settings are read at import time)."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("TOKEN_SECRET", "test-token-secret-key")
# Cheapest bcrypt cost; hashing strength is not under test.
os.environ["BCRYPT_ROUNDS"] = "4"
# Tests that exercise the limiter build their own; keep the shared one out of the way.
os.environ["RATE_LIMIT_MAX_REQUESTS"] = "100000"
