"""Sexagenary cycle arithmetic."""

import pytest

from saju.cycle import (
    BRANCHES, STEMS, Branch, Element, Pillar, Polarity, Stem, as_pillar, branch_index,
    day_pillar_index_from_jdn, jdn, jdn_from_date, normalize, pillar_from_index, pillar_index, stem_index,
    get_year_pillar, to_branch, to_stem, year_pillar, year_pillar_index,
)
from saju.errors import InvalidSymbol


class TestNormalize:
    @pytest.mark.parametrize("n, m, expected", [
        (-1, 60, 59), (60, 60, 0), (125, 60, 5), (-13, 12, 11), (0, 10, 0),
    ])
    def test_wraps_into_range(self, n, m, expected):
        assert normalize(n, m) == expected


class TestSymbols:
    def test_ten_stems_twelve_branches(self):
        assert len(STEMS) == 10
        assert len(BRANCHES) == 12
        assert "".join(s.value for s in STEMS) == "甲乙丙丁戊己庚辛壬癸"
        assert "".join(b.value for b in BRANCHES) == "子丑寅卯辰巳午未申酉戌亥"

    def test_stem_attributes(self):
        assert Stem.JIA.element == Element.WOOD
        assert Stem.JIA.polarity == Polarity.YANG
        assert Stem.GUI.element == Element.WATER
        assert Stem.GUI.polarity == Polarity.YIN
        assert Stem.WU.korean == "무"

    def test_branch_attributes(self):
        assert Branch.YIN.animal == "Tiger"
        assert Branch.CHOU.hidden_stems == (Stem.JI, Stem.GUI, Stem.XIN)
        assert Branch.ZI.element == Element.WATER

    def test_index_lookup_sentinel(self):
        assert stem_index("丙") == 2
        assert branch_index("亥") == 11
        assert stem_index("X") == -1
        assert branch_index("甲") == -1

    def test_coercion_accepts_pinyin_and_index(self):
        assert to_stem("jia") is Stem.JIA
        assert to_stem(9) is Stem.GUI
        assert to_branch("WU") is Branch.WU
        assert to_branch(0) is Branch.ZI

    @pytest.mark.parametrize("bad", ["Q", 10, -1])
    def test_invalid_stem(self, bad):
        with pytest.raises(InvalidSymbol):
            to_stem(bad)

    def test_invalid_branch(self):
        with pytest.raises(InvalidSymbol):
            to_branch(12)


class TestPillars:
    def test_index_zero_is_jiazi(self):
        assert str(pillar_from_index(0)) == "甲子"
        assert str(pillar_from_index(59)) == "癸亥"

    def test_wraparound(self):
        assert str(pillar_from_index(-1)) == "癸亥"
        assert pillar_from_index(60) == pillar_from_index(0)

    def test_inverse_over_full_cycle(self):
        for i in range(60):
            assert pillar_index(pillar_from_index(i)) == i

    def test_parity_mismatch_has_no_index(self):
        p = Pillar("甲", "丑")
        assert not p.is_valid
        with pytest.raises(InvalidSymbol):
            pillar_index(p)

    def test_parse(self):
        p = Pillar.parse("丁酉")
        assert p.stem is Stem.DING
        assert p.branch is Branch.YOU
        assert p.index == 33

    def test_parse_rejects_wrong_length(self):
        with pytest.raises(InvalidSymbol):
            Pillar.parse("甲")

    def test_as_pillar_variants(self):
        assert as_pillar(0) == as_pillar("甲子") == as_pillar(("甲", "子"))
        with pytest.raises(InvalidSymbol):
            as_pillar(3.5)

    def test_to_dict(self):
        d = Pillar.parse("甲子").to_dict()
        assert d["pillar"] == "甲子"
        assert d["stem"]["element"] == "wood"
        assert d["branch"]["animal"] == "Rat"


class TestCalendarOffsets:
    def test_jdn_reference_dates(self):
        assert jdn(2000, 1, 1) == 2451545
        assert jdn(1970, 1, 1) == 2440588
        assert jdn_from_date(1990, 2, 1) == jdn(1990, 2, 1)

    def test_day_index(self):
        # 2000-01-01 is 戊午
        assert str(pillar_from_index(day_pillar_index_from_jdn(2451545))) == "戊午"
        # 1990-02-01 is 丁酉
        assert str(pillar_from_index(day_pillar_index_from_jdn(jdn(1990, 2, 1)))) == "丁酉"

    def test_consecutive_days_step_by_one(self):
        a = day_pillar_index_from_jdn(jdn(2024, 2, 29))
        b = day_pillar_index_from_jdn(jdn(2024, 3, 1))
        assert normalize(b - a, 60) == 1

    @pytest.mark.parametrize("year, expected", [
        (1984, "甲子"), (1989, "己巳"), (2024, "甲辰"), (1924, "甲子"), (2043, "癸亥"),
    ])
    def test_year_pillar(self, year, expected):
        assert str(year_pillar(year)) == expected
        assert year_pillar_index(year) == pillar_index(year_pillar(year))
        assert get_year_pillar(year) == year_pillar(year)
