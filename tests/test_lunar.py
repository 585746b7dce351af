"""Solar / lunar date lookup."""

from datetime import date

import pytest

from saju.errors import AdapterError
from saju.lunar import LunarDate, lunar_date, solar_date


def test_lunar_new_year_1990():
    # Lunar new year fell on 1990-01-27
    assert lunar_date(1990, 2, 1) == LunarDate(1990, 1, 6)


def test_leap_month_is_flagged():
    # 2023 repeated its second month from 2023-03-22
    result = lunar_date(2023, 4, 1)
    assert result.is_leap_month
    assert (result.month, result.day) == (2, 11)
    assert str(result) == "2023-閏02-11"


def test_solar_date():
    assert solar_date(2024, 1, 1) == date(2024, 2, 10)
    assert solar_date(2023, 2, 11, is_leap_month=True) == date(2023, 4, 1)


def test_invalid_lunar_month():
    with pytest.raises(AdapterError):
        solar_date(2024, 13, 1)
