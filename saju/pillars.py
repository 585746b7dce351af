"""
Four Pillars resolution.

Handles:
- Preset policies (day boundary, mean / true solar time)
- Year pillar from the Spring Begins (Li Chun) boundary
- Month pillar from the Sun's longitude (Five Tigers rule for the stem)
- Day pillar from the Julian Day Number of the effective day
- Hour pillar from the corrected clock (Five Rats rule for the stem)

Every step records what it used, so a boundary case can be audited from
the FourPillars metadata alone.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional, Union

from saju.astro_calendar import DateAdapter, apply_lmt, lmt_correction
from saju.cycle import (
    BRANCHES, STEMS, Pillar, Stem, day_pillar_index_from_jdn, jdn, normalize,
    pillar_from_index, to_stem, year_pillar,
)
from saju.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ============================================================
# PRESETS
# ============================================================

DAY_BOUNDARIES = ("midnight", "zi23")


@dataclass(frozen=True)
class Preset:
    """
    Correction policy for pillar resolution.

    day_boundary:
        "midnight" - the day changes at 00:00
        "zi23"     - the day changes at 23:00, when the Zi hour opens
    mean_solar_time_for_hour:
        read the hour branch from local mean time instead of the clock
    mean_solar_time_for_boundary:
        apply the day boundary to local mean time instead of the clock
    equation_of_time:
        go one step further, from mean to apparent (true) solar time
    """
    name: str
    day_boundary: str = "midnight"
    mean_solar_time_for_hour: bool = False
    mean_solar_time_for_boundary: bool = False
    equation_of_time: bool = False

    def __post_init__(self):
        if self.day_boundary not in DAY_BOUNDARIES:
            raise ConfigurationError(
                f"day_boundary must be one of {DAY_BOUNDARIES}, got {self.day_boundary!r}")
        if self.equation_of_time and not (self.mean_solar_time_for_hour
                                          or self.mean_solar_time_for_boundary):
            raise ConfigurationError("equation_of_time needs mean solar time to be enabled")

    @property
    def needs_longitude(self) -> bool:
        return self.mean_solar_time_for_hour or self.mean_solar_time_for_boundary


STANDARD_PRESET = Preset("standard")
TRADITIONAL_PRESET = Preset("traditional", day_boundary="zi23",
                            mean_solar_time_for_hour=True,
                            mean_solar_time_for_boundary=True)
TRUE_SOLAR_PRESET = Preset("true_solar", day_boundary="zi23",
                           mean_solar_time_for_hour=True,
                           mean_solar_time_for_boundary=True,
                           equation_of_time=True)


PRESETS = {p.name: p for p in (STANDARD_PRESET, TRADITIONAL_PRESET, TRUE_SOLAR_PRESET)}


def resolve_preset(preset: Union[str, Preset, None]) -> Preset:
    if preset is None:
        return STANDARD_PRESET
    if isinstance(preset, Preset):
        return preset
    try:
        return PRESETS[preset]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Unknown preset {preset!r}; expected one of {sorted(PRESETS)}") from None


# ============================================================
# SOLAR TIME CORRECTION
# ============================================================

def apply_mean_solar_time(adapter: DateAdapter, instant: datetime, longitude: float,
                          equation_of_time: bool = False) -> datetime:
    """
    The instant expressed on the local solar-time wall clock.

    Mean solar time runs 4 minutes per degree of longitude from UTC.
    With equation_of_time the result is shifted to apparent solar time
    (up to about ±16 minutes over the year).
    """
    adjusted = apply_lmt(instant, longitude)
    if equation_of_time:
        eot = adapter.equation_of_time(instant)
        # Same instant, wall clock moved by the equation of time
        adjusted = adjusted + timedelta(minutes=eot)
    return adjusted


def standard_meridian(adapter: DateAdapter, instant: datetime,
                      tz_offset: Optional[float] = None) -> float:
    """15° per hour of the standard (DST-stripped) offset, or an explicit override."""
    if tz_offset is None:
        tz_offset = adapter.standard_offset_hours(instant)
    return tz_offset * 15.0


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def year_pillar_for(adapter: DateAdapter, instant: datetime) -> tuple:
    """
    Compute the Year Pillar.

    The BaZi year starts at Li Chun (Start of Spring, Sun at 315°),
    usually Feb 3-5. Before Li Chun the previous year's pillar applies.

    Returns:
        (Pillar, solar_year)
    """
    year = instant.year
    li_chun = adapter.solar_crossing(315.0, adapter.create(year, 1, 20, zone="UTC"))
    solar_year = year if adapter.to_millis(instant) >= adapter.to_millis(li_chun) else year - 1
    if solar_year != year:
        logger.debug("%s is before Li Chun (%s): solar year %d",
                     instant.isoformat(), li_chun.isoformat(), solar_year)
    return year_pillar(solar_year), solar_year


def month_branch_index_from_longitude(longitude: float) -> int:
    """
    Map Sun's ecliptic longitude to BaZi month branch index.

    315° (Li Chun) opens Yin (2), then one branch per 30°:
    345° → Mao (3), 15° → Chen (4), ..., 285° (Xiao Han) → Chou (1).
    """
    return (int(normalize(longitude + 45.0, 360.0) // 30) + 2) % 12


def first_month_stem_index(year_stem) -> int:
    """
    Five Tigers Escape (Wu Hu Dun): stem of the Tiger month.

    - Year stem Jia/Ji → Bing
    - Year stem Yi/Geng → Wu
    - Year stem Bing/Xin → Geng
    - Year stem Ding/Ren → Ren
    - Year stem Wu/Gui → Jia
    """
    return (to_stem(year_stem).index % 5 * 2 + 2) % 10


def month_pillar_from_branch(year_stem, month_branch_index: int) -> Pillar:
    months_from_tiger = normalize(month_branch_index - 2, 12)
    stem_index = (first_month_stem_index(year_stem) + months_from_tiger) % 10
    return Pillar(STEMS[stem_index], BRANCHES[month_branch_index])


def month_pillar_for(adapter: DateAdapter, instant: datetime,
                     year_stem: Optional[Stem] = None) -> tuple:
    """
    Compute the Month Pillar.

    The branch comes from the solar term in force; the stem from the
    year stem via Five Tigers.

    Returns:
        (Pillar, sun_longitude)
    """
    if year_stem is None:
        year_stem = year_pillar_for(adapter, instant)[0].stem
    longitude = adapter.sun_longitude(instant)
    branch_index = month_branch_index_from_longitude(longitude)
    return month_pillar_from_branch(year_stem, branch_index), longitude


def _solar_clock(adapter: DateAdapter, instant: datetime, longitude: Optional[float],
                 equation_of_time: bool, purpose: str) -> datetime:
    if longitude is None:
        raise ConfigurationError(f"longitude is required when mean solar time is used for the {purpose}")
    return apply_mean_solar_time(adapter, instant, longitude, equation_of_time)


def effective_day_date(adapter: DateAdapter, instant: datetime, preset: Preset = STANDARD_PRESET,
                       longitude: Optional[float] = None) -> date:
    """
    The civil date whose day pillar applies.

    Under "zi23" the Zi hour (23:00 onward) already belongs to the next day.
    """
    clock = instant
    if preset.mean_solar_time_for_boundary:
        clock = _solar_clock(adapter, instant, longitude, preset.equation_of_time, "day boundary")
    day = clock.date()
    if preset.day_boundary == "zi23" and clock.hour >= 23:
        day = date.fromordinal(day.toordinal() + 1)
        logger.debug("Zi hour at %s: day rolls over to %s", clock.isoformat(), day)
    return day


def day_pillar_for_date(day: date) -> Pillar:
    """
    Compute the Day Pillar using Julian Day Number.

    The sexagenary 60-day cycle maps to JDN with a fixed offset
    (2000-01-01, JDN 2451545, is Wu Wu).
    """
    return pillar_from_index(day_pillar_index_from_jdn(jdn(day.year, day.month, day.day)))


def hour_branch_index(hour: int) -> int:
    """
    Chinese hours (shi chen) are 2-hour blocks:
    23:00-00:59 = Zi (Rat)      = branch 0
    01:00-02:59 = Chou (Ox)     = branch 1
    ...
    21:00-22:59 = Hai (Pig)     = branch 11
    """
    return ((hour + 1) // 2) % 12


def hour_pillar_from_branch(day_stem, branch_index: int) -> Pillar:
    """
    Five Rats Escape (Wu Shu Dun): Zi hour stem from the day stem.

    Jia/Ji day → Jia Zi, Yi/Geng → Bing Zi, Bing/Xin → Wu Zi,
    Ding/Ren → Geng Zi, Wu/Gui → Ren Zi.
    """
    start_stem = to_stem(day_stem).index % 5 * 2
    return Pillar(STEMS[(start_stem + branch_index) % 10], BRANCHES[branch_index])


def hour_pillar_for(adapter: DateAdapter, instant: datetime, day_stem,
                    preset: Preset = STANDARD_PRESET,
                    longitude: Optional[float] = None) -> tuple:
    """
    Compute the Hour Pillar.

    Returns:
        (Pillar, adjusted_instant) where adjusted_instant is the clock the
        hour branch was read from.
    """
    clock = instant
    if preset.mean_solar_time_for_hour:
        clock = _solar_clock(adapter, instant, longitude, preset.equation_of_time, "hour")
    return hour_pillar_from_branch(day_stem, hour_branch_index(clock.hour)), clock


# ============================================================
# FOUR PILLARS
# ============================================================

@dataclass(frozen=True)
class FourPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    solar_year: int
    sun_longitude: float
    effective_date: date
    adjusted_instant: datetime
    lmt_correction_minutes: Optional[float]
    preset: Preset = field(default=STANDARD_PRESET)

    @property
    def day_master(self) -> Stem:
        return self.day.stem

    def as_tuple(self) -> tuple:
        return self.year, self.month, self.day, self.hour

    def to_dict(self):
        return {
            "year": str(self.year),
            "month": str(self.month),
            "day": str(self.day),
            "hour": str(self.hour),
        }


def get_four_pillars(adapter: DateAdapter, instant: datetime, longitude: Optional[float] = None,
                     tz_offset: Optional[float] = None,
                     preset: Union[str, Preset, None] = STANDARD_PRESET) -> FourPillars:
    """
    Resolve all four pillars for a local instant.

    Args:
        adapter: date adapter (ephemeris + zones)
        instant: timezone-aware local birth instant; a naive datetime is
            accepted when tz_offset is given
        longitude: degrees east, for mean solar time
        tz_offset: explicit standard UTC offset in hours; overrides the
            zone's own standard offset as the reference meridian
        preset: Preset or preset name
    """
    preset = resolve_preset(preset)
    if preset.needs_longitude and longitude is None:
        raise ConfigurationError(f"Preset {preset.name!r} requires a longitude")
    if instant.tzinfo is None and tz_offset is not None:
        instant = adapter.localize(instant, tz_offset)

    yp, solar_year = year_pillar_for(adapter, instant)
    mp, sun_longitude = month_pillar_for(adapter, instant, yp.stem)

    day = effective_day_date(adapter, instant, preset, longitude)
    dp = day_pillar_for_date(day)

    hp, adjusted = hour_pillar_for(adapter, instant, dp.stem, preset, longitude)

    correction = None
    if longitude is not None:
        correction = lmt_correction(longitude, standard_meridian(adapter, instant, tz_offset))

    logger.debug("Pillars for %s (%s): %s %s %s %s",
                 instant.isoformat(), preset.name, yp, mp, dp, hp)

    return FourPillars(
        year=yp,
        month=mp,
        day=dp,
        hour=hp,
        solar_year=solar_year,
        sun_longitude=sun_longitude,
        effective_date=day,
        adjusted_instant=adjusted,
        lmt_correction_minutes=correction,
        preset=preset,
    )
