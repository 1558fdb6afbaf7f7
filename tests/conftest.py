from __future__ import annotations

import pytest

import tracegraph
from tracegraph.core import clear_context


@pytest.fixture(autouse=True)
def _reset_default_engine() -> None:
    """Reset the default engine and context between tests."""
    tracegraph._reset_default_engine()
    clear_context()
