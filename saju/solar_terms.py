"""
The 24 solar terms (節氣).

Each term is the moment the Sun reaches a fixed ecliptic longitude,
15° apart, starting from Minor Cold at 285°. The even-numbered terms
(Minor Cold, Spring Begins, Awakening of Insects, ...) are the 12 Jie
(節) that open a BaZi month:

    Xiao Han   (285°) → Chou (Ox, month 12)
    Li Chun    (315°) → Yin  (Tiger, month 1)
    Jing Zhe   (345°) → Mao  (Rabbit, month 2)
    Qing Ming  (15°)  → Chen (Dragon, month 3)
    ...
    Da Xue     (255°) → Zi   (Rat, month 11)

Swiss Ephemeris (through the date adapter) finds the exact crossing
moment; this module only decides which crossing to ask for.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from saju.astro_calendar import DateAdapter
from saju.cycle import normalize
from saju.errors import AdapterError, InvalidSymbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolarTerm:
    key: str
    name: str
    pinyin: str
    korean: str
    hanja: str
    longitude: int


# (key, english, pinyin, korean, hanja) in cyclical order from 285°
_TERM_DEFINITIONS = [
    ("minor_cold", "Minor Cold", "Xiao Han", "소한", "小寒"),
    ("major_cold", "Major Cold", "Da Han", "대한", "大寒"),
    ("spring_begins", "Spring Begins", "Li Chun", "입춘", "立春"),
    ("rain_water", "Rain Water", "Yu Shui", "우수", "雨水"),
    ("awakening_insects", "Awakening of Insects", "Jing Zhe", "경칩", "驚蟄"),
    ("vernal_equinox", "Vernal Equinox", "Chun Fen", "춘분", "春分"),
    ("pure_brightness", "Pure Brightness", "Qing Ming", "청명", "淸明"),
    ("grain_rain", "Grain Rain", "Gu Yu", "곡우", "穀雨"),
    ("summer_begins", "Summer Begins", "Li Xia", "입하", "立夏"),
    ("grain_buds", "Grain Buds", "Xiao Man", "소만", "小滿"),
    ("grain_in_ear", "Grain in Ear", "Mang Zhong", "망종", "芒種"),
    ("summer_solstice", "Summer Solstice", "Xia Zhi", "하지", "夏至"),
    ("minor_heat", "Minor Heat", "Xiao Shu", "소서", "小暑"),
    ("major_heat", "Major Heat", "Da Shu", "대서", "大暑"),
    ("autumn_begins", "Autumn Begins", "Li Qiu", "입추", "立秋"),
    ("end_of_heat", "End of Heat", "Chu Shu", "처서", "處暑"),
    ("white_dew", "White Dew", "Bai Lu", "백로", "白露"),
    ("autumnal_equinox", "Autumnal Equinox", "Qiu Fen", "추분", "秋分"),
    ("cold_dew", "Cold Dew", "Han Lu", "한로", "寒露"),
    ("frost_descends", "Frost Descends", "Shuang Jiang", "상강", "霜降"),
    ("winter_begins", "Winter Begins", "Li Dong", "입동", "立冬"),
    ("minor_snow", "Minor Snow", "Xiao Xue", "소설", "小雪"),
    ("major_snow", "Major Snow", "Da Xue", "대설", "大雪"),
    ("winter_solstice", "Winter Solstice", "Dong Zhi", "동지", "冬至"),
]

SOLAR_TERMS = tuple(
    SolarTerm(key, name, pinyin, korean, hanja, (285 + 15 * k) % 360)
    for k, (key, name, pinyin, korean, hanja) in enumerate(_TERM_DEFINITIONS)
)

_TERMS_BY_KEY = {t.key: t for t in SOLAR_TERMS}

# A term's previous crossing is never more than ~16 days back
_LOOKBACK_DAYS = 20

# Crossings this close to the instant count as already reached
_BOUNDARY_TOLERANCE = timedelta(seconds=1)


def term_by_key(key: str) -> SolarTerm:
    try:
        return _TERMS_BY_KEY[key]
    except KeyError:
        raise InvalidSymbol(f"Unknown solar term: {key!r}") from None


def term_index(term: SolarTerm) -> int:
    return SOLAR_TERMS.index(term)


def term_index_from_longitude(longitude: float) -> int:
    """Index of the term in force at a solar longitude (boundary inclusive)."""
    return int(normalize(longitude - 285.0, 360.0) // 15) % 24


def is_jie(index: int) -> bool:
    """Even-indexed terms are the month-opening Jie."""
    return index % 2 == 0


@dataclass(frozen=True)
class SolarTermDate:
    term: SolarTerm
    instant: datetime


@dataclass(frozen=True)
class SolarTermInfo:
    sun_longitude: float
    current: SolarTerm
    current_instant: datetime
    days_since_current: int
    next: SolarTerm
    next_instant: datetime
    days_until_next: int
    # Jie only: the boundaries that matter for months and major luck
    prev_jie: SolarTerm
    prev_jie_instant: datetime
    next_jie: SolarTerm
    next_jie_instant: datetime


def last_crossing(adapter: DateAdapter, longitude: float, before: datetime) -> datetime:
    """Most recent crossing of `longitude` at or before `before`."""
    return adapter.solar_crossing(longitude, before - timedelta(days=_LOOKBACK_DAYS))


def analyze_solar_terms(adapter: DateAdapter, instant: datetime) -> SolarTermInfo:
    """
    Locate the current and next solar terms around an instant.

    The current term is the one whose longitude is the largest value
    not above the Sun's longitude; an exact hit counts as current.
    """
    longitude = adapter.sun_longitude(instant)
    idx = term_index_from_longitude(longitude)

    next_idx = (idx + 1) % 24
    next_instant = adapter.solar_crossing(SOLAR_TERMS[next_idx].longitude,
                                          instant - timedelta(days=1))
    if next_instant - instant <= _BOUNDARY_TOLERANCE:
        # Sat on the boundary: the ephemeris says the next term has begun
        idx = next_idx
        current_instant = next_instant
        next_idx = (idx + 1) % 24
        next_instant = adapter.solar_crossing(SOLAR_TERMS[next_idx].longitude, instant)
    else:
        current_instant = last_crossing(adapter, SOLAR_TERMS[idx].longitude, instant)

    if is_jie(idx):
        prev_jie_idx, prev_jie_instant = idx, current_instant
    else:
        prev_jie_idx = (idx - 1) % 24
        prev_jie_instant = last_crossing(adapter, SOLAR_TERMS[prev_jie_idx].longitude,
                                         current_instant)

    if is_jie(next_idx):
        next_jie_idx, next_jie_instant = next_idx, next_instant
    else:
        next_jie_idx = (next_idx + 1) % 24
        next_jie_instant = adapter.solar_crossing(SOLAR_TERMS[next_jie_idx].longitude,
                                                  next_instant)

    days_since = max(0, math.floor(adapter.days_between(current_instant, instant)))
    days_until = math.ceil(adapter.days_between(instant, next_instant))

    logger.debug("Sun at %.4f°: current %s (%s), next %s (%s)",
                 longitude, SOLAR_TERMS[idx].key, current_instant.isoformat(),
                 SOLAR_TERMS[next_idx].key, next_instant.isoformat())

    return SolarTermInfo(
        sun_longitude=longitude,
        current=SOLAR_TERMS[idx],
        current_instant=current_instant,
        days_since_current=days_since,
        next=SOLAR_TERMS[next_idx],
        next_instant=next_instant,
        days_until_next=days_until,
        prev_jie=SOLAR_TERMS[prev_jie_idx],
        prev_jie_instant=prev_jie_instant,
        next_jie=SOLAR_TERMS[next_jie_idx],
        next_jie_instant=next_jie_instant,
    )


def solar_terms_for_year(adapter: DateAdapter, year: int, zone="UTC") -> list[SolarTermDate]:
    """
    All 24 solar terms of a Gregorian year in chronological order.

    Every longitude is crossed exactly once between Jan 1 and Dec 31
    (Minor Cold falls around Jan 5, Winter Solstice around Dec 21).
    """
    start = adapter.create(year, 1, 1, zone=zone)
    results = [SolarTermDate(term, adapter.solar_crossing(term.longitude, start))
               for term in SOLAR_TERMS]
    results.sort(key=lambda x: x.instant)
    return results


def jie_instants(adapter: DateAdapter, year: int, zone="UTC") -> list[SolarTermDate]:
    """The 12 month-opening Jie of a Gregorian year."""
    return [d for d in solar_terms_for_year(adapter, year, zone)
            if is_jie(term_index(d.term))]


def nearest_jie(adapter: DateAdapter, instant: datetime, forward: bool) -> SolarTermDate:
    """
    Nearest Jie crossing from an instant in the given direction.

    Forward finds the next Jie strictly after the instant; backward
    finds the last one at or before it.
    """
    info = analyze_solar_terms(adapter, instant)
    if forward:
        if info.next_jie_instant > instant:
            return SolarTermDate(info.next_jie, info.next_jie_instant)
        raise AdapterError(f"Could not find next Jie from {instant.isoformat()}")
    return SolarTermDate(info.prev_jie, info.prev_jie_instant)
