"""Shared pytest configuration for the notification centre tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Settings are read once at import time, so the in-memory database must be
# configured before any ``trana`` module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for path in (str(ROOT), str(TESTS_DIR)):
    if path not in sys.path:
        sys.path.insert(0, path)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
