"""Date adapter, LMT and zone lookup."""

from datetime import datetime, timedelta, timezone

import pytest

from saju.astro_calendar import (
    apply_lmt, lmt_correction, resolve_zone, timezone_for, utc_offset_for,
)
from saju.errors import AdapterError


class TestAdapter:
    def test_create_in_zone(self, adapter):
        instant = adapter.create(1990, 2, 1, 12, 10)
        assert instant.utcoffset() == timedelta(hours=9)
        assert adapter.to_utc(instant) == datetime(1990, 2, 1, 3, 10, tzinfo=timezone.utc)
        assert adapter.zone_name(instant) == "Asia/Seoul"

    def test_fixed_offset_zone(self, adapter):
        instant = adapter.create(2024, 1, 1, zone=5.5)
        assert instant.utcoffset() == timedelta(hours=5, minutes=30)

    def test_invalid_input(self, adapter):
        with pytest.raises(AdapterError):
            adapter.create(2024, 2, 30)
        with pytest.raises(AdapterError):
            adapter.create(2024, 1, 1, zone="Mars/Olympus")

    def test_naive_instants_are_rejected(self, adapter):
        with pytest.raises(AdapterError):
            adapter.to_utc(datetime(2024, 1, 1))

    def test_localize(self, adapter):
        instant = adapter.localize(datetime(2024, 1, 1, 9), 9)
        assert adapter.to_utc(instant).hour == 0

    def test_set_zone_keeps_instant(self, adapter):
        instant = adapter.create(1990, 2, 1, 12, 10)
        paris = adapter.set_zone(instant, "Europe/Paris")
        assert paris == instant
        assert paris.hour == 4

    def test_millis_round_trip(self, adapter):
        instant = adapter.create_utc(2000, 1, 1, 12)
        millis = adapter.to_millis(instant)
        assert millis == 946728000000.0
        assert adapter.from_millis(millis) == instant

    def test_duration_arithmetic(self, adapter):
        start = adapter.create(2024, 3, 9, 12, zone="America/New_York")
        later = adapter.plus_days(start, 1)
        # DST started overnight: one absolute day later is 13:00 on the clock
        assert later.hour == 13
        assert adapter.days_between(start, later) == pytest.approx(1.0)
        assert adapter.minus_days(later, 1) == start
        assert adapter.plus_minutes(start, 90) - start == timedelta(minutes=90)

    def test_julian_day(self, adapter):
        assert adapter.julian_day(adapter.create_utc(2000, 1, 1, 12)) == pytest.approx(2451545.0)
        back = adapter.from_julian_day(2451545.0)
        assert back == adapter.create_utc(2000, 1, 1, 12)

    def test_sun_longitude_near_equinox(self, adapter):
        lon = adapter.sun_longitude(adapter.create_utc(2024, 3, 20, 3, 6))
        assert lon < 0.05 or lon > 359.95

    def test_standard_offset_strips_dst(self, adapter):
        summer = adapter.create(2024, 7, 1, 12, zone="America/New_York")
        assert adapter.standard_offset_hours(summer) == -5.0


class TestLmt:
    def test_seoul_correction(self):
        assert lmt_correction(126.9778) == pytest.approx(-32.0888)
        assert lmt_correction(135.0) == 0.0

    def test_apply_lmt_keeps_instant(self, adapter):
        instant = adapter.create(1990, 2, 1, 12, 10)
        lmt = apply_lmt(instant, 126.9778)
        assert lmt == instant
        assert lmt.utcoffset() == timedelta(minutes=126.9778 * 4)


class TestZones:
    def test_utc_offset_without_dst(self, adapter):
        assert utc_offset_for(adapter.create(1990, 2, 1, 12)) == (9.0, 9.0, False)

    def test_utc_offset_with_dst(self, adapter):
        # Seoul kept summer time in 1988
        clock, standard, dst = utc_offset_for(adapter.create(1988, 7, 1, 12))
        assert (clock, standard, dst) == (10.0, 9.0, True)

    def test_timezone_for_coordinates(self):
        assert timezone_for(37.5665, 126.9778) == "Asia/Seoul"

    def test_resolve_zone(self):
        assert resolve_zone("Europe/Paris", None, None) == "Europe/Paris"
        with pytest.raises(AdapterError):
            resolve_zone(None, None, 10.0)
