"""
Shared fixtures for digest tests.

Usage:
    def test_something(now):
        ...
"""

from datetime import datetime

import pytest

from tests.helpers import NOW


@pytest.fixture
def now() -> datetime:
    return NOW
