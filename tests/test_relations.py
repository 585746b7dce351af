"""Stem and branch interactions."""

from saju.cycle import Branch, Element, Stem
from saju.relations import (
    DISCOURTEOUS, SELF, UNGRATEFUL, BranchClash, RelationKind, analyze_relations,
    find_branch_clash, find_branch_destruction, find_branch_harm, find_branch_six_combination,
    find_stem_combination,
)


class TestPairLookups:
    def test_stem_combination(self):
        assert find_stem_combination("甲", "己") is Element.EARTH
        assert find_stem_combination("癸", "戊") is Element.FIRE
        assert find_stem_combination("甲", "乙") is None

    def test_clash_is_symmetric(self):
        assert find_branch_clash("子", "午")
        assert find_branch_clash("午", "子")
        assert not find_branch_clash("子", "丑")

    def test_six_combination(self):
        assert find_branch_six_combination("子", "丑") is Element.EARTH
        assert find_branch_six_combination("巳", "申") is Element.WATER
        assert find_branch_six_combination("子", "子") is None

    def test_harm_and_destruction(self):
        assert find_branch_harm("寅", "巳")
        assert find_branch_destruction("巳", "申")
        assert not find_branch_harm("寅", "申")


class TestAnalyze:
    def test_reference_chart(self, reference_pillars):
        result = analyze_relations(*reference_pillars)
        # 巳 酉 丑 all present: metal frame
        assert len(result.triple_combinations) == 1
        triple = result.triple_combinations[0]
        assert triple.result_element is Element.METAL
        assert set(triple.positions) == {"year", "month", "day"}
        # 丑 午 harm between month and hour
        assert len(result.harms) == 1
        assert result.harms[0].positions == ("month", "hour")
        assert result.stem_combinations == ()
        assert result.clashes == ()
        assert result.punishments == ()

    def test_parity_invalid_pillar_is_accepted(self):
        # 丙巳 is not one of the sixty pillars; relations only look at the symbols
        result = analyze_relations("甲寅", "丙巳", "戊申", "庚子")
        assert len(result.punishments) == 1
        assert result.punishments[0].punishment_type == UNGRATEFUL
        assert result.punishments[0].is_complete
        assert result.punishments[0].positions == ("year", "month", "day")
        assert result.stem_combinations == ()

    def test_ungrateful_punishment_chart(self):
        result = analyze_relations("甲寅", "己巳", "戊申", "壬子")
        assert len(result.punishments) == 1
        punishment = result.punishments[0]
        assert punishment.punishment_type == UNGRATEFUL
        assert punishment.is_complete
        assert punishment.branches == (Branch.YIN, Branch.SI, Branch.SHEN)
        assert punishment.positions == ("year", "month", "day")

        assert [c.result_element for c in result.stem_combinations] == [Element.EARTH]
        assert result.stem_combinations[0].pair == (Stem.JIA, Stem.JI)
        assert [c.result_element for c in result.six_combinations] == [Element.WATER]
        assert [r.pair for r in result.harms] == [(Branch.YIN, Branch.SI)]
        assert [r.pair for r in result.destructions] == [(Branch.SI, Branch.SHEN)]
        assert [r.pair for r in result.clashes] == [(Branch.YIN, Branch.SHEN)]
        # 申子 without 辰 is no water frame
        assert result.triple_combinations == ()

    def test_partial_punishment(self):
        result = analyze_relations("甲寅", "己巳", "甲子", "甲子")
        assert len(result.punishments) == 1
        assert not result.punishments[0].is_complete
        assert result.punishments[0].branches == (Branch.YIN, Branch.SI)

    def test_pair_and_self_punishment(self):
        result = analyze_relations("甲子", "丁卯", "丙辰", "戊辰")
        types = sorted(p.punishment_type for p in result.punishments)
        assert types == sorted([DISCOURTEOUS, SELF])
        self_punishment = next(p for p in result.punishments if p.punishment_type == SELF)
        assert self_punishment.positions == ("day", "hour")
        assert self_punishment.branches == (Branch.CHEN, Branch.CHEN)

    def test_directional_requires_all_three(self):
        assert analyze_relations("甲寅", "丁卯", "丙寅", "戊子").directional_combinations == ()
        full = analyze_relations("甲寅", "丁卯", "丙辰", "戊子")
        assert [d.result_element for d in full.directional_combinations] == [Element.WOOD]

    def test_each_relation_reported_under_one_kind(self):
        result = analyze_relations("甲寅", "己巳", "戊申", "壬子")
        assert len(result.all) == sum(len(group) for group in result.by_kind.values())
        for kind, group in result.by_kind.items():
            assert all(r.kind is kind for r in group)
        assert isinstance(result.clashes[0], BranchClash)
        assert result.clashes[0].label == RelationKind.BRANCH_CLASH.label

    def test_combinations_view(self):
        result = analyze_relations("甲寅", "己巳", "戊申", "壬子")
        assert len(result.combinations) == 2
