"""
Solar ↔ lunar date lookup.

Thin wrapper over lunar_python. lunar_python marks a leap month with a
negative month number; here that becomes an explicit flag.
"""

from dataclasses import dataclass
from datetime import date

from lunar_python import Lunar, Solar

from saju.errors import AdapterError


@dataclass(frozen=True)
class LunarDate:
    year: int
    month: int
    day: int
    is_leap_month: bool = False

    def __str__(self):
        leap = "閏" if self.is_leap_month else ""
        return f"{self.year}-{leap}{self.month:02d}-{self.day:02d}"


def lunar_date(year: int, month: int, day: int) -> LunarDate:
    """Lunar date for a Gregorian (solar) date."""
    try:
        lunar = Solar.fromYmd(year, month, day).getLunar()
        lunar_month = lunar.getMonth()
        return LunarDate(
            year=lunar.getYear(),
            month=abs(lunar_month),
            day=lunar.getDay(),
            is_leap_month=lunar_month < 0,
        )
    except Exception as exc:
        raise AdapterError(f"Lunar lookup failed for {year}-{month:02d}-{day:02d}: {exc}") from exc


def solar_date(year: int, month: int, day: int, is_leap_month: bool = False) -> date:
    """Gregorian date for a lunar date."""
    try:
        solar = Lunar.fromYmd(year, -month if is_leap_month else month, day).getSolar()
        return date(solar.getYear(), solar.getMonth(), solar.getDay())
    except Exception as exc:
        raise AdapterError(f"Solar lookup failed for lunar {year}-{month:02d}-{day:02d}: {exc}") from exc
