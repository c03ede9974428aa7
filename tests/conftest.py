"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import List

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import FakeTransport  # noqa: E402
from replicate_client.services.replicate import ReplicateClient  # noqa: E402


@pytest.fixture
def make_client():
    def _make(routes=None, **kwargs):
        transport = FakeTransport(routes)
        kwargs.setdefault("token", "r8_test")
        kwargs.setdefault("polling_interval", 0)
        client = ReplicateClient(transport=transport, **kwargs)
        return client, transport

    return _make


@pytest.fixture
def sleeps():
    """Records requested pauses instead of sleeping."""
    recorded: List[float] = []

    async def _sleep(seconds: float) -> None:
        recorded.append(seconds)

    _sleep.recorded = recorded
    return _sleep
