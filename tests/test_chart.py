"""End-to-end chart assembly and serialization."""

import json
from datetime import date, datetime

import pytest

from saju.chart import get_saju, save_result, to_jsonable
from saju.cycle import Element
from saju.errors import AdapterError, ConfigurationError
from saju.lunar import LunarDate
from saju.strength import StrengthLevel
from saju.yongshen import YongShenMethod


@pytest.fixture(scope="module")
def reference_result(adapter, seoul_birth, seoul_longitude):
    return get_saju(adapter, seoul_birth, longitude=seoul_longitude, gender="male",
                    current_year=2025)


class TestGetSaju:
    def test_pillars(self, reference_result, reference_pillars):
        assert tuple(str(p) for p in reference_result.pillars.as_tuple()) == reference_pillars

    def test_analyses_are_attached(self, reference_result):
        assert reference_result.lunar == LunarDate(1990, 1, 6)
        assert reference_result.strength.level is StrengthLevel.NEUTRAL_STRONG
        assert reference_result.yongshen.method is YongShenMethod.SEASONAL_ADJUSTMENT
        assert reference_result.recommendations["directions"] == ["동", "중앙"]
        assert reference_result.element_counts[Element.FIRE] == 5
        assert len(reference_result.relations.triple_combinations) == 1
        assert reference_result.solar_terms.current.key == "major_cold"
        assert reference_result.sinsals.matches

    def test_luck(self, reference_result):
        assert reference_result.major_luck is not None
        assert not reference_result.major_luck.is_forward
        # Age 37 in 2025 falls in the third ten-year pillar
        assert reference_result.current_luck.index == 3
        years = [y.year for y in reference_result.yearly_luck]
        assert years == list(range(2020, 2036))
        assert reference_result.yearly_luck[0].age == 32

    def test_meta(self, reference_result):
        meta = reference_result.meta
        assert meta["solar_year_used"] == 1989
        assert meta["effective_day_date"] == date(1990, 2, 1)
        assert meta["preset"] == "standard"
        assert meta["timezone"] == "Asia/Seoul"
        assert meta["clock_utc_offset"] == 9.0
        assert meta["standard_utc_offset"] == 9.0
        assert meta["dst_detected"] is False
        assert meta["timezone_source"] == "auto"
        assert meta["lmt_correction_minutes"] == pytest.approx(-32.09)

    def test_without_gender(self, adapter, seoul_birth):
        result = get_saju(adapter, seoul_birth)
        assert result.major_luck is None
        assert result.current_luck is None
        assert result.yearly_luck is None
        assert result.meta["lmt_correction_minutes"] is None

    def test_major_luck_can_be_skipped(self, adapter, seoul_birth):
        result = get_saju(adapter, seoul_birth, gender="female", include_major_luck=False)
        assert result.major_luck is None

    def test_explicit_yearly_range(self, adapter, seoul_birth):
        result = get_saju(adapter, seoul_birth, yearly_luck_range=(2024, 2026))
        assert [str(y.pillar) for y in result.yearly_luck] == ["甲辰", "乙巳", "丙午"]

    def test_manual_offset_on_naive_instant(self, adapter, reference_pillars):
        result = get_saju(adapter, datetime(1990, 2, 1, 12, 10), longitude=126.9778, tz_offset=9)
        assert tuple(str(p) for p in result.pillars.as_tuple()) == reference_pillars
        assert result.meta["timezone_source"] == "manual"

    def test_lunar_date_follows_day_boundary(self, adapter):
        # 23:50 KST is 23:18 LMT: the Zi hour already belongs to March 11
        birth = adapter.create(2024, 3, 10, 23, 50)
        result = get_saju(adapter, birth, longitude=126.9778, preset="traditional")
        assert result.meta["effective_day_date"] == date(2024, 3, 11)
        assert result.lunar == LunarDate(2024, 2, 2)
        assert get_saju(adapter, birth).lunar == LunarDate(2024, 2, 1)

    def test_naive_instant_is_rejected(self, adapter):
        with pytest.raises(AdapterError):
            get_saju(adapter, datetime(1990, 2, 1, 12, 10))

    def test_dst_is_reported(self, adapter):
        birth = adapter.create(1988, 7, 1, 12, 0)
        result = get_saju(adapter, birth, longitude=126.9778, preset="traditional")
        assert result.meta["dst_detected"] is True
        assert result.meta["timezone_source"] == "auto_split"
        assert result.meta["clock_utc_offset"] == 10.0
        assert result.meta["standard_utc_offset"] == 9.0
        # 12:00 KDT is 11:00 standard time, 10:28 LMT: Snake hour
        assert result.pillars.hour.branch.value == "巳"

    def test_configuration_errors(self, adapter, seoul_birth):
        with pytest.raises(ConfigurationError):
            get_saju(adapter, seoul_birth, preset="sidereal")
        with pytest.raises(ConfigurationError):
            get_saju(adapter, seoul_birth, yearly_luck_range=(2030, 2020))
        with pytest.raises(ConfigurationError):
            get_saju(adapter, seoul_birth, preset="true_solar")
        with pytest.raises(ConfigurationError):
            get_saju(adapter, seoul_birth, gender="unknown")


class TestSerialization:
    def test_to_jsonable(self, reference_result):
        data = to_jsonable(reference_result)
        # Must survive a plain JSON dump
        json.dumps(data, ensure_ascii=False)
        assert data["pillars"]["year"] == "己巳"
        assert data["pillars"]["effective_date"] == "1990-02-01"
        assert data["ten_gods"]["day"]["stem_god"]["key"] == "day_master"
        assert data["ten_gods"]["day"]["stem_god"]["hanja"] == "日干"
        assert data["element_counts"]["fire"] == 5
        assert data["yongshen"]["primary"] == "wood"
        assert data["relations"]["triple_combinations"][0]["result_element"] == "metal"
        assert data["strength"]["level"]["korean"] == "중화신강"
        assert data["yongshen"]["method"] == "조후"
        assert len(data["relations"]["all"]) == len(reference_result.relations.all)
        assert data["major_luck"]["gender"] == "male"
        assert data["meta"]["solar_year_used"] == 1989

    def test_save_result(self, reference_result, tmp_path):
        path = save_result(reference_result, tmp_path / "charts" / "seoul.json")
        assert path.exists()
        text = path.read_text(encoding="utf-8")
        assert "己巳" in text
        assert json.loads(text)["pillars"]["hour"] == "丙午"
