"""
Date adapter for the saju engine.

Handles:
- Timezone-aware instant construction and epoch-millisecond conversion
- Duration arithmetic on absolute instants
- Apparent solar longitude and exact longitude crossings (Swiss Ephemeris)
- Equation of time
- LMT (local mean time) correction and timezone lookup from coordinates

This is the only module that knows about the ephemeris. Everything else
asks the adapter for "where is the Sun" and "when does it get there".
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import swisseph as swe

from saju.errors import AdapterError

logger = logging.getLogger(__name__)

# Point Swiss Ephemeris to data files. Without them it falls back to the
# built-in Moshier theory, which is well inside a minute for the Sun.
_ephe_path = os.environ.get("SAJU_EPHE_PATH", str(Path(__file__).parent.parent / "ephe"))
swe.set_ephe_path(_ephe_path)

_SUN_FLAGS = swe.FLG_SWIEPH
_UNIX_EPOCH_JD = 2440587.5
_MS_PER_DAY = 86_400_000

Zone = Union[str, int, float, None]


def _tzinfo(zone: Zone):
    """IANA zone name or fixed UTC offset in hours."""
    if zone is None or zone == "UTC" or zone == "utc":
        return timezone.utc
    if isinstance(zone, (int, float)):
        return timezone(timedelta(hours=zone))
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise AdapterError(f"Unknown time zone: {zone!r}") from exc


class DateAdapter:
    """
    Time and astronomy primitives over timezone-aware datetimes.

    Stateless: one instance can be shared freely.
    """

    def create(self, year: int, month: int, day: int, hour: int = 0,
               minute: int = 0, second: int = 0, zone: Zone = "Asia/Seoul") -> datetime:
        try:
            return datetime(year, month, day, hour, minute, second, tzinfo=_tzinfo(zone))
        except ValueError as exc:
            raise AdapterError(f"Invalid civil date-time {year}-{month}-{day} {hour}:{minute}") from exc

    def create_utc(self, year: int, month: int, day: int, hour: int = 0,
                   minute: int = 0, second: int = 0) -> datetime:
        return self.create(year, month, day, hour, minute, second, zone="UTC")

    def localize(self, naive: datetime, zone: Zone) -> datetime:
        """Attach a zone to a naive civil date-time."""
        if naive.tzinfo is not None:
            return naive
        return naive.replace(tzinfo=_tzinfo(zone))

    def to_utc(self, instant: datetime) -> datetime:
        _require_aware(instant)
        return instant.astimezone(timezone.utc)

    def to_millis(self, instant: datetime) -> float:
        _require_aware(instant)
        return instant.timestamp() * 1000.0

    def from_millis(self, millis: float, zone: Zone = "UTC") -> datetime:
        return datetime.fromtimestamp(millis / 1000.0, tz=_tzinfo(zone))

    def set_zone(self, instant: datetime, zone: Zone) -> datetime:
        _require_aware(instant)
        return instant.astimezone(_tzinfo(zone))

    def plus_minutes(self, instant: datetime, minutes: float) -> datetime:
        """Add an absolute duration, keeping the instant's zone."""
        utc = self.to_utc(instant) + timedelta(minutes=minutes)
        return utc.astimezone(instant.tzinfo)

    def plus_days(self, instant: datetime, days: float) -> datetime:
        return self.plus_minutes(instant, days * 1440)

    def minus_days(self, instant: datetime, days: float) -> datetime:
        return self.plus_minutes(instant, -days * 1440)

    def days_between(self, start: datetime, end: datetime) -> float:
        return (self.to_millis(end) - self.to_millis(start)) / _MS_PER_DAY

    def julian_day(self, instant: datetime) -> float:
        """Julian Day (UT) of an instant."""
        utc = self.to_utc(instant)
        hours = utc.hour + utc.minute / 60 + (utc.second + utc.microsecond / 1e6) / 3600
        return swe.julday(utc.year, utc.month, utc.day, hours)

    def from_julian_day(self, jd: float, zone: Zone = "UTC") -> datetime:
        return self.from_millis((jd - _UNIX_EPOCH_JD) * _MS_PER_DAY, zone)

    def sun_longitude(self, instant: datetime) -> float:
        """Apparent geocentric ecliptic longitude of the Sun, degrees [0, 360)."""
        jd = self.julian_day(instant)
        try:
            position, _ = swe.calc_ut(jd, swe.SUN, _SUN_FLAGS)
        except swe.Error as exc:
            raise AdapterError(f"Cannot resolve solar longitude at {instant.isoformat()}: {exc}") from exc
        return position[0] % 360.0

    def solar_crossing(self, longitude: float, start: datetime) -> datetime:
        """
        First instant at or after `start` when the Sun reaches `longitude`.

        Returned in the zone of `start`.
        """
        jd_start = self.julian_day(start)
        try:
            jd_cross = swe.solcross_ut(float(longitude) % 360.0, jd_start, _SUN_FLAGS)
        except swe.Error as exc:
            raise AdapterError(f"Cannot find solar crossing of {longitude}° after {start.isoformat()}: {exc}") from exc
        if jd_cross < jd_start:
            raise AdapterError(f"Solar crossing of {longitude}° not found after {start.isoformat()}")
        logger.debug("Sun reaches %.1f° at JD %.5f", longitude, jd_cross)
        return self.from_julian_day(jd_cross, zone=None).astimezone(start.tzinfo)

    def equation_of_time(self, instant: datetime) -> float:
        """Apparent minus mean solar time, in minutes."""
        jd = self.julian_day(instant)
        try:
            days = swe.time_equ(jd)
        except swe.Error as exc:
            raise AdapterError(f"Cannot compute equation of time at {instant.isoformat()}: {exc}") from exc
        return days * 1440.0

    def standard_offset_hours(self, instant: datetime) -> float:
        """
        The zone's standard (non-DST) offset at this instant.

        BaZi works from standard time, so any DST shift is stripped.
        """
        _require_aware(instant)
        offset = instant.utcoffset().total_seconds()
        dst = instant.dst()
        if dst is not None:
            offset -= dst.total_seconds()
        return offset / 3600

    def zone_name(self, instant: datetime) -> str:
        _require_aware(instant)
        tz = instant.tzinfo
        return getattr(tz, "key", None) or instant.tzname() or "UTC"


def _require_aware(instant) -> None:
    if not isinstance(instant, datetime):
        raise AdapterError(f"Expected a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise AdapterError(f"Naive datetime {instant.isoformat()} has no time zone")


# ============================================================
# LOCAL MEAN TIME
# ============================================================

def lmt_correction(longitude: float, standard_meridian: float = 135.0) -> float:
    """
    Calculate Local Mean Time correction in minutes.

    Korea keeps clocks on the 135°E meridian (UTC+9). Seoul at 126.98°E
    sees the Sun about half an hour later than the clock suggests.

    Args:
        longitude: birth location longitude in degrees (east positive)
        standard_meridian: timezone standard meridian (15° per UTC hour)

    Returns:
        Correction in minutes (negative = subtract from clock time)

    Example:
        Seoul (126.9778°E): correction = (126.9778 - 135.0) * 4 = -32.09 min
        So 12:10 clock time → ~11:38 LMT
    """
    return (longitude - standard_meridian) * 4.0


def lmt_zone(longitude: float) -> timezone:
    """Fixed-offset zone whose wall clock is local mean time at `longitude`."""
    return timezone(timedelta(minutes=longitude * 4.0), f"LMT{longitude:+.4f}")


def apply_lmt(instant: datetime, longitude: float) -> datetime:
    """
    The same instant, expressed on the local mean time wall clock.

    Working from the absolute instant makes DST irrelevant: the result
    equals standard clock time + lmt_correction(longitude, meridian).
    """
    _require_aware(instant)
    return instant.astimezone(lmt_zone(longitude))


# ============================================================
# TIMEZONE LOOKUP
# ============================================================

_tf = None


def timezone_for(latitude: float, longitude: float) -> str:
    """IANA zone name for a coordinate."""
    global _tf
    if _tf is None:
        from timezonefinder import TimezoneFinder
        _tf = TimezoneFinder()
    tz_name = _tf.timezone_at(lat=latitude, lng=longitude)
    if tz_name is None:
        raise AdapterError(f"Could not determine timezone for ({latitude}, {longitude})")
    return tz_name


def utc_offset_for(instant: datetime) -> tuple:
    """
    (clock_offset, standard_offset, dst_detected) for an aware instant.

    clock_offset:    what the clock was actually set to (includes DST if active)
    standard_offset: the zone's standard (non-DST) offset
    """
    _require_aware(instant)
    clock_offset = instant.utcoffset().total_seconds() / 3600
    dst = instant.dst()
    dst_detected = dst is not None and dst.total_seconds() > 0
    standard_offset = clock_offset - (dst.total_seconds() / 3600 if dst_detected else 0)
    return clock_offset, standard_offset, dst_detected


def resolve_zone(zone: Optional[str], latitude: Optional[float], longitude: Optional[float]) -> str:
    if zone:
        return zone
    if latitude is not None and longitude is not None:
        return timezone_for(latitude, longitude)
    raise AdapterError("A time zone name or a latitude/longitude pair is required")
