"""
Pytest configuration and shared fixtures.
Adds the repo root to sys.path so tests can import from src.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.account.seed import InMemorySeedProvider  # noqa: E402
from src.api.client import LedgerAPI  # noqa: E402
from src.store.inmemory import InMemoryStore  # noqa: E402

TEST_SEED = "ABCDEFGHIJKLMNOPQRSTUVWXYZ9" * 3


class FixedClock:
    """TimeSource returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def time(self) -> datetime:
        return self.now


@pytest.fixture
def seed():
    return TEST_SEED


@pytest.fixture
def seed_provider():
    return InMemorySeedProvider(TEST_SEED)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def mock_api():
    api = MagicMock(spec=LedgerAPI)
    return api
