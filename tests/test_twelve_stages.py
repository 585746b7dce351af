"""Twelve life stages."""

import pytest

from saju.cycle import Branch, Stem
from saju.twelve_stages import TwelveStage, analyze_twelve_stages, birth_branch, twelve_stage


class TestTwelveStage:
    @pytest.mark.parametrize("stem, branch, stage", [
        ("甲", "亥", TwelveStage.LONG_LIFE),
        ("甲", "子", TwelveStage.BATHING),
        ("甲", "寅", TwelveStage.ESTABLISHMENT),
        ("甲", "卯", TwelveStage.IMPERIAL),
        ("甲", "未", TwelveStage.TOMB),
        ("乙", "午", TwelveStage.LONG_LIFE),
        ("乙", "寅", TwelveStage.IMPERIAL),
        ("乙", "戌", TwelveStage.TOMB),
        ("庚", "巳", TwelveStage.LONG_LIFE),
        ("癸", "卯", TwelveStage.LONG_LIFE),
    ])
    def test_stage(self, stem, branch, stage):
        assert twelve_stage(stem, branch) is stage

    def test_birth_branches(self):
        assert birth_branch(Stem.BING) is Branch.YIN
        assert birth_branch(Stem.WU) is Branch.YIN
        assert birth_branch(Stem.JI) is Branch.YOU

    def test_every_branch_gets_a_distinct_stage(self):
        for stem in Stem:
            assert len({twelve_stage(stem, b) for b in Branch}) == 12

    def test_labels(self):
        assert TwelveStage.IMPERIAL.hanja == "帝旺"
        assert TwelveStage.LONG_LIFE.korean == "장생"
        assert TwelveStage.DEATH.strength == "weak"


def test_reference_chart(reference_pillars):
    result = analyze_twelve_stages(*reference_pillars)
    assert result.year is TwelveStage.IMPERIAL
    assert result.month is TwelveStage.TOMB
    assert result.day is TwelveStage.LONG_LIFE
    assert result.hour is TwelveStage.ESTABLISHMENT
