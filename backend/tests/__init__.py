"""Test package initialization."""

import os

# Default settings for tests; nothing here talks to a real database or relay.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("STAFF_RECIPIENT_ID", "admin")
os.environ.setdefault("SUBMIT_RATE_LIMIT", "100/minute")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")
