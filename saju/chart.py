"""
Saju chart assembly.

Computes the full Four Pillars reading for one birth moment: pillars,
lunar date, Ten Gods, strength, relations, Yongshen, solar-term context,
luck pillars, twelve stages and sinsals, plus the metadata needed to
audit boundary cases.

Usage from Python:
    from saju.astro_calendar import DateAdapter
    from saju.chart import get_saju, to_jsonable

    adapter = DateAdapter()
    birth = adapter.create(1990, 2, 1, 12, 10, zone="Asia/Seoul")
    result = get_saju(adapter, birth, longitude=126.9778, gender="male",
                      current_year=2025)
    print(to_jsonable(result)["pillars"])
"""

import json
import logging
from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from saju.astro_calendar import DateAdapter, utc_offset_for
from saju.cycle import Branch, Element, Pillar, Polarity, Stem
from saju.errors import ConfigurationError
from saju.luck import (
    DEFAULT_MAJOR_LUCK_COUNT, LuckPillar, MajorLuck, calculate_major_luck, calculate_yearly_luck,
    current_major_luck, default_yearly_range,
)
from saju.lunar import LunarDate, lunar_date
from saju.pillars import FourPillars, get_four_pillars, resolve_preset
from saju.relations import RelationsResult, analyze_relations
from saju.sinsals import SinsalResult, analyze_sinsals
from saju.solar_terms import SolarTermInfo, analyze_solar_terms
from saju.strength import StrengthResult, analyze_strength
from saju.ten_gods import FourPillarsTenGods, analyze_ten_gods, count_elements, count_ten_gods
from saju.twelve_stages import TwelveStagesResult, analyze_twelve_stages
from saju.yongshen import YongShenResult, analyze_yongshen, element_recommendations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SajuResult:
    pillars: FourPillars
    lunar: LunarDate
    ten_gods: FourPillarsTenGods
    ten_god_counts: dict
    element_counts: dict
    strength: StrengthResult
    relations: RelationsResult
    yongshen: YongShenResult
    recommendations: dict
    solar_terms: SolarTermInfo
    major_luck: Optional[MajorLuck]
    current_luck: Optional[LuckPillar]
    yearly_luck: Optional[list]
    twelve_stages: TwelveStagesResult
    sinsals: SinsalResult
    meta: dict


def _timezone_meta(adapter: DateAdapter, instant: datetime, tz_offset: Optional[float]) -> dict:
    """
    Clock vs. standard offset at the birth instant.

    Solar time works from the standard offset; when DST was active the
    clock offset differs and both are reported.
    """
    clock_offset, standard_offset, dst_detected = utc_offset_for(instant)
    if tz_offset is not None:
        source = "manual"
    else:
        source = "auto_split" if dst_detected else "auto"
    return {
        "timezone": adapter.zone_name(instant),
        "clock_utc_offset": clock_offset,
        "standard_utc_offset": tz_offset if tz_offset is not None else standard_offset,
        "dst_detected": dst_detected,
        "timezone_source": source,
    }


def get_saju(adapter: DateAdapter, instant: datetime, longitude: Optional[float] = None,
             tz_offset: Optional[float] = None, preset="standard", gender=None,
             current_year: Optional[int] = None, yearly_luck_range: Optional[tuple] = None,
             include_major_luck: bool = True,
             major_luck_count: int = DEFAULT_MAJOR_LUCK_COUNT) -> SajuResult:
    """
    Compute the full Saju reading for a birth moment.

    Args:
        adapter: date adapter
        instant: timezone-aware local birth instant
        longitude: degrees east, for mean solar time
        tz_offset: explicit standard UTC offset in hours (overrides the zone's)
        preset: preset name or Preset
        gender: "male" / "female"; major luck is computed only when given
        current_year: locates the current luck pillar and, without an
            explicit range, centres the yearly luck window
        yearly_luck_range: (from_year, to_year), inclusive
        include_major_luck: set False to skip major luck even with a gender
        major_luck_count: number of ten-year pillars
    """
    # Reject bad configuration before any ephemeris work
    preset = resolve_preset(preset)
    if yearly_luck_range is not None:
        from_year, to_year = yearly_luck_range
        if to_year < from_year:
            raise ConfigurationError(f"Yearly luck range is inverted: {from_year}..{to_year}")

    if instant.tzinfo is None and tz_offset is not None:
        instant = adapter.localize(instant, tz_offset)
    fp = get_four_pillars(adapter, instant, longitude=longitude, tz_offset=tz_offset, preset=preset)
    year, month, day, hour = fp.as_tuple()

    ten_gods = analyze_ten_gods(year, month, day, hour)
    strength = analyze_strength(year, month, day, hour)
    relations = analyze_relations(year, month, day, hour)
    yongshen = analyze_yongshen(year, month, day, hour, strength=strength)
    terms = analyze_solar_terms(adapter, instant)

    major = None
    current = None
    if gender is not None and include_major_luck:
        major = calculate_major_luck(adapter, instant, gender, year, month,
                                     count=major_luck_count, solar_terms=terms)
        if current_year is not None:
            current = current_major_luck(major, current_year - fp.solar_year + 1)

    if yearly_luck_range is None and current_year is not None:
        yearly_luck_range = default_yearly_range(current_year)
    yearly = None
    if yearly_luck_range is not None:
        yearly = calculate_yearly_luck(fp.solar_year, *yearly_luck_range)

    meta = {
        "solar_year_used": fp.solar_year,
        "sun_longitude": round(fp.sun_longitude, 6),
        "effective_day_date": fp.effective_date,
        "adjusted_instant_for_hour": fp.adjusted_instant,
        "lmt_correction_minutes": (None if fp.lmt_correction_minutes is None
                                   else round(fp.lmt_correction_minutes, 2)),
        "preset": preset.name,
        "longitude": longitude,
    }
    meta.update(_timezone_meta(adapter, instant, tz_offset))

    logger.debug("Saju for %s: %s", instant.isoformat(), " ".join(str(p) for p in fp.as_tuple()))

    return SajuResult(
        pillars=fp,
        lunar=lunar_date(fp.effective_date.year, fp.effective_date.month, fp.effective_date.day),
        ten_gods=ten_gods,
        ten_god_counts=count_ten_gods(ten_gods),
        element_counts=count_elements(ten_gods),
        strength=strength,
        relations=relations,
        yongshen=yongshen,
        recommendations=element_recommendations(yongshen),
        solar_terms=terms,
        major_luck=major,
        current_luck=current,
        yearly_luck=yearly,
        twelve_stages=analyze_twelve_stages(year, month, day, hour),
        sinsals=analyze_sinsals(year, month, day, hour),
        meta=meta,
    )


# ============================================================
# SERIALIZATION
# ============================================================

def _key(k):
    return k.value if isinstance(k, Enum) else str(k)


def to_jsonable(obj):
    """
    Convert a result tree to plain JSON types.

    Pillars, stems and branches become their hanzi; elements and
    polarities their plain values, matching dict keys. Labelled enums
    (Ten Gods, strength levels, stages, stars) carry their labels.
    """
    if isinstance(obj, Pillar):
        return str(obj)
    if isinstance(obj, (Stem, Branch, Element, Polarity)):
        return obj.value
    if isinstance(obj, Enum):
        if hasattr(obj, "hanja"):
            return {"key": obj.value, "korean": obj.korean, "hanja": obj.hanja}
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        out = {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
        if isinstance(obj, RelationsResult):
            out["all"] = to_jsonable(obj.all)
        return out
    if isinstance(obj, dict):
        return {_key(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in obj]
    return obj


def save_result(result: SajuResult, path) -> Path:
    """Write a result as JSON (UTF-8, hanzi kept as-is)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_jsonable(result), f, indent=2, ensure_ascii=False)
    return path
