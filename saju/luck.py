"""
Luck pillar projection.

Handles:
- Major luck (大運 Da Yun): ten-year pillars stepped from the month pillar
- Yearly luck (歲運): the pillar of each calendar year
- Monthly luck (月運): the twelve month pillars of a solar year
- Daily luck (日運): day pillars over a date range

Only major luck depends on the birth moment; the others are plain
cycle lookups.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from saju.astro_calendar import DateAdapter
from saju.cycle import BRANCHES, Pillar, Polarity, as_pillar, pillar_from_index, year_pillar
from saju.errors import ConfigurationError
from saju.pillars import day_pillar_for_date, month_pillar_from_branch
from saju.solar_terms import SolarTermInfo, analyze_solar_terms

logger = logging.getLogger(__name__)

DEFAULT_MAJOR_LUCK_COUNT = 8

# Default yearly window around the current year
YEARS_BEFORE_CURRENT = 5
YEARS_AFTER_CURRENT = 10


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value) -> "Gender":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        aliases = {"m": "male", "f": "female", "남": "male", "여": "female"}
        try:
            return cls(aliases.get(key, key))
        except ValueError:
            raise ConfigurationError(f"Unknown gender: {value!r} (expected 'male' or 'female')") from None


@dataclass(frozen=True)
class LuckPillar:
    index: int
    start_age: int
    end_age: int
    pillar: Pillar

    def __str__(self):
        return f"LP{self.index}: {self.pillar} ages {self.start_age}-{self.end_age}"


@dataclass(frozen=True)
class StartAge:
    years: int
    months: int
    days_to_term: float


@dataclass(frozen=True)
class MajorLuck:
    gender: Gender
    year_stem_polarity: Polarity
    is_forward: bool
    start_age: int
    start_age_detail: StartAge
    days_to_term: float
    pillars: tuple


def start_age_from_days(days: float) -> StartAge:
    """
    Convert days to the nearest Jie into a luck starting age.

    Traditional rule: 3 days = 1 year, so 1 day = 4 months.
    """
    total_months = math.floor(days / 3 * 12 + 0.5)
    return StartAge(years=total_months // 12, months=total_months % 12, days_to_term=days)


def _rounded_age(detail: StartAge) -> int:
    return detail.years + (1 if detail.months >= 6 else 0)


def calculate_major_luck(adapter: DateAdapter, birth: datetime, gender, year_pillar, month_pillar,
                         count: int = DEFAULT_MAJOR_LUCK_COUNT,
                         solar_terms: Optional[SolarTermInfo] = None) -> MajorLuck:
    """
    Compute Major Luck Pillars (大運 Da Yun).

    Direction of count depends on gender + year stem polarity:
    - Yang stem year + Male OR Yin stem year + Female → count FORWARD
    - Yang stem year + Female OR Yin stem year + Male → count BACKWARD

    Starting age comes from the time between birth and the next Jie
    (forward) or the previous Jie (backward).

    Args:
        adapter: date adapter
        birth: timezone-aware birth instant
        gender: Gender or "male" / "female"
        year_pillar, month_pillar: natal pillars
        count: how many ten-year pillars to compute
        solar_terms: solar term context of the birth instant, if already known
    """
    gender = Gender.parse(gender)
    if count < 0:
        raise ConfigurationError(f"Major luck count must not be negative: {count}")
    year_pillar, month_pillar = as_pillar(year_pillar), as_pillar(month_pillar)

    polarity = year_pillar.stem.polarity
    forward = (polarity == Polarity.YANG) == (gender == Gender.MALE)

    if solar_terms is None:
        solar_terms = analyze_solar_terms(adapter, birth)
    boundary = solar_terms.next_jie_instant if forward else solar_terms.prev_jie_instant
    days = abs(adapter.days_between(birth, boundary))
    detail = start_age_from_days(days)
    start_age = _rounded_age(detail)

    logger.debug("Major luck %s: %.2f days to %s, start age %d (%dy %dm)",
                 "forward" if forward else "backward", days,
                 (solar_terms.next_jie if forward else solar_terms.prev_jie).key,
                 start_age, detail.years, detail.months)

    step = 1 if forward else -1
    base = month_pillar.index
    pillars = tuple(
        LuckPillar(
            index=i,
            start_age=start_age + 10 * (i - 1),
            end_age=start_age + 10 * i - 1,
            pillar=pillar_from_index(base + step * i),
        )
        for i in range(1, count + 1)
    )

    return MajorLuck(
        gender=gender,
        year_stem_polarity=polarity,
        is_forward=forward,
        start_age=start_age,
        start_age_detail=detail,
        days_to_term=days,
        pillars=pillars,
    )


def current_major_luck(major: MajorLuck, age: int) -> Optional[LuckPillar]:
    """The luck pillar covering an age, or None outside the projected span."""
    for lp in major.pillars:
        if lp.start_age <= age <= lp.end_age:
            return lp
    return None


# ============================================================
# YEARLY / MONTHLY / DAILY
# ============================================================

@dataclass(frozen=True)
class YearlyLuck:
    year: int
    pillar: Pillar
    age: int


def default_yearly_range(current_year: int) -> tuple:
    return current_year - YEARS_BEFORE_CURRENT, current_year + YEARS_AFTER_CURRENT


def calculate_yearly_luck(birth_year: int, from_year: int, to_year: int) -> list[YearlyLuck]:
    """
    Year pillars for from_year..to_year inclusive.

    Age is counted the East Asian way: 1 in the birth year.
    """
    if to_year < from_year:
        raise ConfigurationError(f"Yearly luck range is inverted: {from_year}..{to_year}")
    return [YearlyLuck(year=y, pillar=year_pillar(y), age=y - birth_year + 1)
            for y in range(from_year, to_year + 1)]


@dataclass(frozen=True)
class MonthlyLuck:
    year: int
    month: int  # 1 = Tiger month (opens at Spring Begins) ... 12 = Ox month
    pillar: Pillar


def calculate_monthly_luck(year: int) -> list[MonthlyLuck]:
    """
    The twelve month pillars of a solar year, Tiger month first.

    Stems follow Five Tigers from the year stem; the Ox month closes
    the year in the following January.
    """
    year_stem = year_pillar(year).stem
    return [
        MonthlyLuck(year=year, month=m,
                    pillar=month_pillar_from_branch(year_stem, BRANCHES[(m + 1) % 12].index))
        for m in range(1, 13)
    ]


@dataclass(frozen=True)
class DailyLuck:
    date: date
    pillar: Pillar


def calculate_daily_luck(start: date, days: int) -> list[DailyLuck]:
    """Day pillars for `days` consecutive civil days from `start`."""
    if isinstance(start, datetime):
        start = start.date()
    if days < 0:
        raise ConfigurationError(f"Day count must not be negative: {days}")
    return [DailyLuck(date=d, pillar=day_pillar_for_date(d))
            for d in (start + timedelta(days=i) for i in range(days))]
