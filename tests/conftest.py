"""Root conftest for all tests.

Every analysis call receives a pinned clock so window boundaries are exact.
"""

import datetime as dt

import pytest

from athlete_analytics.core.clock import FixedClock

TODAY = dt.date(2025, 1, 28)


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)
