from __future__ import annotations

import pytest

from tests._fixtures.fakes import FakeEngine


@pytest.fixture
def engine() -> FakeEngine:
    """Provide a layout engine fake that records its calls."""
    return FakeEngine()
