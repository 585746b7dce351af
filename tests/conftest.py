"""
Pytest shared configuration.

Provides:
- A session-wide date adapter
- The reference birth chart (1990-02-01 12:10, Seoul) used across modules
"""

import pytest

from saju.astro_calendar import DateAdapter

SEOUL_LONGITUDE = 126.9778


# ==================== Adapter Fixtures ====================

@pytest.fixture(scope="session")
def adapter():
    """
    Date adapter shared by the whole session.

    Returns:
        DateAdapter instance
    """
    return DateAdapter()


# ==================== Chart Fixtures ====================

@pytest.fixture(scope="session")
def seoul_birth(adapter):
    """
    1990-02-01 12:10 in Seoul.

    Falls before Spring Begins, so the solar year is still 1989.
    Expected pillars: 己巳 / 丁丑 / 丁酉 / 丙午.
    """
    return adapter.create(1990, 2, 1, 12, 10, zone="Asia/Seoul")


@pytest.fixture(scope="session")
def seoul_longitude():
    return SEOUL_LONGITUDE


@pytest.fixture
def reference_pillars():
    """Pillars of the reference chart as strings, year to hour."""
    return ("己巳", "丁丑", "丁酉", "丙午")
