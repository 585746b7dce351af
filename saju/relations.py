"""
Stem and branch interactions inside a chart.

Handles:
- Stem Combinations (天干合)
- Six Combinations (六合), Three Harmony (三合), Directional (方合)
- Six Clashes (六冲), Six Harms (六害), Destructions (相破)
- Punishments (刑), including self-punishment

This module COMPUTES and FLAGS. Every relation found is reported once,
under exactly one kind, together with the pillar positions involved.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations as pairs_of
from typing import Optional

from saju.cycle import Branch, Element, Stem, as_pillar, to_branch, to_stem

POSITIONS = ("year", "month", "day", "hour")


class RelationKind(Enum):
    STEM_COMBINATION = "stem_combination"
    BRANCH_SIX_COMBINATION = "branch_six_combination"
    BRANCH_TRIPLE_COMBINATION = "branch_triple_combination"
    BRANCH_DIRECTIONAL_COMBINATION = "branch_directional_combination"
    BRANCH_CLASH = "branch_clash"
    BRANCH_PUNISHMENT = "branch_punishment"
    BRANCH_HARM = "branch_harm"
    BRANCH_DESTRUCTION = "branch_destruction"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    RelationKind.STEM_COMBINATION: "천간합 (天干合)",
    RelationKind.BRANCH_SIX_COMBINATION: "육합 (六合)",
    RelationKind.BRANCH_TRIPLE_COMBINATION: "삼합 (三合)",
    RelationKind.BRANCH_DIRECTIONAL_COMBINATION: "방합 (方合)",
    RelationKind.BRANCH_CLASH: "충 (沖)",
    RelationKind.BRANCH_PUNISHMENT: "형 (刑)",
    RelationKind.BRANCH_HARM: "해 (害)",
    RelationKind.BRANCH_DESTRUCTION: "파 (破)",
}


# ============================================================
# TABLES
# ============================================================

STEM_COMBINATIONS = {
    frozenset({Stem.JIA, Stem.JI}): Element.EARTH,
    frozenset({Stem.YI, Stem.GENG}): Element.METAL,
    frozenset({Stem.BING, Stem.XIN}): Element.WATER,
    frozenset({Stem.DING, Stem.REN}): Element.WOOD,
    frozenset({Stem.WU, Stem.GUI}): Element.FIRE,
}

SIX_COMBINATIONS = {
    frozenset({Branch.ZI, Branch.CHOU}): Element.EARTH,
    frozenset({Branch.YIN, Branch.HAI}): Element.WOOD,
    frozenset({Branch.MAO, Branch.XU}): Element.FIRE,
    frozenset({Branch.CHEN, Branch.YOU}): Element.METAL,
    frozenset({Branch.SI, Branch.SHEN}): Element.WATER,
    frozenset({Branch.WU, Branch.WEI}): Element.EARTH,
}

THREE_HARMONY = {
    (Branch.YIN, Branch.WU, Branch.XU): Element.FIRE,
    (Branch.SHEN, Branch.ZI, Branch.CHEN): Element.WATER,
    (Branch.HAI, Branch.MAO, Branch.WEI): Element.WOOD,
    (Branch.SI, Branch.YOU, Branch.CHOU): Element.METAL,
}

DIRECTIONAL_COMBINATIONS = {
    (Branch.YIN, Branch.MAO, Branch.CHEN): Element.WOOD,
    (Branch.SI, Branch.WU, Branch.WEI): Element.FIRE,
    (Branch.SHEN, Branch.YOU, Branch.XU): Element.METAL,
    (Branch.HAI, Branch.ZI, Branch.CHOU): Element.WATER,
}

# Opposites on the 12-branch wheel (distance 6)
SIX_CLASHES = frozenset(
    frozenset({Branch(b), Branch(c)}) for b, c in
    (("子", "午"), ("丑", "未"), ("寅", "申"), ("卯", "酉"), ("辰", "戌"), ("巳", "亥"))
)

SIX_HARMS = frozenset(
    frozenset({Branch(b), Branch(c)}) for b, c in
    (("子", "未"), ("丑", "午"), ("寅", "巳"), ("卯", "辰"), ("申", "亥"), ("酉", "戌"))
)

DESTRUCTIONS = frozenset(
    frozenset({Branch(b), Branch(c)}) for b, c in
    (("子", "酉"), ("丑", "辰"), ("寅", "亥"), ("卯", "午"), ("巳", "申"), ("未", "戌"))
)

# Punishment sets and their sub-type labels
UNGRATEFUL = "무은지형"     # 寅巳申, ungrateful punishment
DISCOURTEOUS = "무례지형"   # 丑戌未 and 子卯, punishment without courtesy
SELF = "자형"               # 辰辰 午午 酉酉 亥亥

TRIPLE_PUNISHMENTS = (
    ((Branch.YIN, Branch.SI, Branch.SHEN), UNGRATEFUL),
    ((Branch.CHOU, Branch.XU, Branch.WEI), DISCOURTEOUS),
)
PAIR_PUNISHMENTS = (
    ((Branch.ZI, Branch.MAO), DISCOURTEOUS),
)
SELF_PUNISHING = (Branch.CHEN, Branch.WU, Branch.YOU, Branch.HAI)


# ============================================================
# RELATION VARIANTS
# ============================================================

@dataclass(frozen=True)
class Relation:
    kind: RelationKind = field(init=False)
    positions: tuple

    @property
    def label(self) -> str:
        return self.kind.label


@dataclass(frozen=True)
class StemCombination(Relation):
    pair: tuple
    result_element: Element
    kind: RelationKind = field(default=RelationKind.STEM_COMBINATION, init=False)


@dataclass(frozen=True)
class BranchSixCombination(Relation):
    pair: tuple
    result_element: Element
    kind: RelationKind = field(default=RelationKind.BRANCH_SIX_COMBINATION, init=False)


@dataclass(frozen=True)
class BranchTripleCombination(Relation):
    branches: tuple
    result_element: Element
    kind: RelationKind = field(default=RelationKind.BRANCH_TRIPLE_COMBINATION, init=False)


@dataclass(frozen=True)
class BranchDirectionalCombination(Relation):
    branches: tuple
    result_element: Element
    kind: RelationKind = field(default=RelationKind.BRANCH_DIRECTIONAL_COMBINATION, init=False)


@dataclass(frozen=True)
class BranchClash(Relation):
    pair: tuple
    kind: RelationKind = field(default=RelationKind.BRANCH_CLASH, init=False)


@dataclass(frozen=True)
class BranchPunishment(Relation):
    branches: tuple
    punishment_type: str
    is_complete: bool = True
    kind: RelationKind = field(default=RelationKind.BRANCH_PUNISHMENT, init=False)


@dataclass(frozen=True)
class BranchHarm(Relation):
    pair: tuple
    kind: RelationKind = field(default=RelationKind.BRANCH_HARM, init=False)


@dataclass(frozen=True)
class BranchDestruction(Relation):
    pair: tuple
    kind: RelationKind = field(default=RelationKind.BRANCH_DESTRUCTION, init=False)


@dataclass(frozen=True)
class RelationsResult:
    stem_combinations: tuple = ()
    six_combinations: tuple = ()
    triple_combinations: tuple = ()
    directional_combinations: tuple = ()
    clashes: tuple = ()
    punishments: tuple = ()
    harms: tuple = ()
    destructions: tuple = ()

    @property
    def by_kind(self) -> dict:
        return {
            RelationKind.STEM_COMBINATION: self.stem_combinations,
            RelationKind.BRANCH_SIX_COMBINATION: self.six_combinations,
            RelationKind.BRANCH_TRIPLE_COMBINATION: self.triple_combinations,
            RelationKind.BRANCH_DIRECTIONAL_COMBINATION: self.directional_combinations,
            RelationKind.BRANCH_CLASH: self.clashes,
            RelationKind.BRANCH_PUNISHMENT: self.punishments,
            RelationKind.BRANCH_HARM: self.harms,
            RelationKind.BRANCH_DESTRUCTION: self.destructions,
        }

    @property
    def all(self) -> tuple:
        return tuple(r for group in self.by_kind.values() for r in group)

    @property
    def combinations(self) -> tuple:
        """Every combination kind together (a view, not a separate kind)."""
        return (self.stem_combinations + self.six_combinations
                + self.triple_combinations + self.directional_combinations)


# ============================================================
# PAIR LOOKUPS
# ============================================================

def find_stem_combination(stem1, stem2) -> Optional[Element]:
    """Element a stem pair combines into, or None."""
    return STEM_COMBINATIONS.get(frozenset({to_stem(stem1), to_stem(stem2)}))


def find_branch_clash(branch1, branch2) -> bool:
    return frozenset({to_branch(branch1), to_branch(branch2)}) in SIX_CLASHES


def find_branch_six_combination(branch1, branch2) -> Optional[Element]:
    """Element a branch pair combines into, or None."""
    return SIX_COMBINATIONS.get(frozenset({to_branch(branch1), to_branch(branch2)}))


def find_branch_harm(branch1, branch2) -> bool:
    return frozenset({to_branch(branch1), to_branch(branch2)}) in SIX_HARMS


def find_branch_destruction(branch1, branch2) -> bool:
    return frozenset({to_branch(branch1), to_branch(branch2)}) in DESTRUCTIONS


# ============================================================
# ANALYSIS
# ============================================================

def _positions_of(members, labelled) -> tuple:
    """First position holding each member branch."""
    return tuple(next(pos for pos, b in labelled if b == m) for m in members)


def analyze_relations(year, month, day, hour) -> RelationsResult:
    """
    Find every stem and branch interaction between the four pillars.

    Pairs are checked over all unordered position pairs. Three Harmony
    and Directional combinations require all three branches. A triple
    punishment fires once per set when at least two of its branches are
    present; is_complete tells whether the third is there too.

    Args:
        year, month, day, hour: Pillar objects or two-character strings
    """
    pillars = [as_pillar(p) for p in (year, month, day, hour)]
    stems = list(zip(POSITIONS, (p.stem for p in pillars)))
    branches = list(zip(POSITIONS, (p.branch for p in pillars)))

    stem_combos = []
    for (p1, s1), (p2, s2) in pairs_of(stems, 2):
        element = find_stem_combination(s1, s2)
        if element is not None:
            stem_combos.append(StemCombination(positions=(p1, p2), pair=(s1, s2),
                                               result_element=element))

    six, clashes, harms, destructions = [], [], [], []
    for (p1, b1), (p2, b2) in pairs_of(branches, 2):
        where, pair = (p1, p2), (b1, b2)
        element = find_branch_six_combination(b1, b2)
        if element is not None:
            six.append(BranchSixCombination(positions=where, pair=pair, result_element=element))
        if find_branch_clash(b1, b2):
            clashes.append(BranchClash(positions=where, pair=pair))
        if find_branch_harm(b1, b2):
            harms.append(BranchHarm(positions=where, pair=pair))
        if find_branch_destruction(b1, b2):
            destructions.append(BranchDestruction(positions=where, pair=pair))

    present = {b for _, b in branches}

    triples = [
        BranchTripleCombination(positions=_positions_of(members, branches),
                                branches=members, result_element=element)
        for members, element in THREE_HARMONY.items()
        if present.issuperset(members)
    ]
    directional = [
        BranchDirectionalCombination(positions=_positions_of(members, branches),
                                     branches=members, result_element=element)
        for members, element in DIRECTIONAL_COMBINATIONS.items()
        if present.issuperset(members)
    ]

    punishments = []
    for members, sub_type in TRIPLE_PUNISHMENTS:
        matched = tuple(b for b in members if b in present)
        if len(matched) >= 2:
            punishments.append(BranchPunishment(
                positions=_positions_of(matched, branches), branches=matched,
                punishment_type=sub_type, is_complete=len(matched) == len(members)))
    for members, sub_type in PAIR_PUNISHMENTS:
        if present.issuperset(members):
            punishments.append(BranchPunishment(
                positions=_positions_of(members, branches), branches=members,
                punishment_type=sub_type))
    counts = Counter(b for _, b in branches)
    for branch in SELF_PUNISHING:
        if counts[branch] >= 2:
            punishments.append(BranchPunishment(
                positions=tuple(pos for pos, b in branches if b == branch),
                branches=(branch,) * counts[branch],
                punishment_type=SELF))

    return RelationsResult(
        stem_combinations=tuple(stem_combos),
        six_combinations=tuple(six),
        triple_combinations=tuple(triples),
        directional_combinations=tuple(directional),
        clashes=tuple(clashes),
        punishments=tuple(punishments),
        harms=tuple(harms),
        destructions=tuple(destructions),
    )
