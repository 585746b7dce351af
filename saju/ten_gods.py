"""
Ten Gods (十神) relationship mapping.

The Ten Gods describe the relationship between any stem and the Day Master.
They are determined by element relationship + polarity match:

    same element          → Companion / Rob Wealth
    Day Master produces   → Eating God / Hurting Officer
    Day Master controls   → Indirect Wealth / Direct Wealth
    controls Day Master   → Seven Killings / Direct Officer
    produces Day Master   → Indirect Seal / Direct Seal

(first name: same polarity, second: different polarity)
"""

from dataclasses import dataclass
from enum import Enum

from saju.cycle import (
    CONTROLS, ELEMENTS, GENERATES, Element, Pillar, Stem, as_pillar,
    to_branch, to_stem,
)


class TenGod(Enum):
    COMPANION = "companion"
    ROB_WEALTH = "rob_wealth"
    EATING_GOD = "eating_god"
    HURTING_OFFICER = "hurting_officer"
    INDIRECT_WEALTH = "indirect_wealth"
    DIRECT_WEALTH = "direct_wealth"
    SEVEN_KILLINGS = "seven_killings"
    DIRECT_OFFICER = "direct_officer"
    INDIRECT_SEAL = "indirect_seal"
    DIRECT_SEAL = "direct_seal"
    DAY_MASTER = "day_master"

    @property
    def korean(self) -> str:
        return _LABELS[self][0]

    @property
    def hanja(self) -> str:
        return _LABELS[self][1]

    @property
    def english(self) -> str:
        return _LABELS[self][2]


_LABELS = {
    TenGod.COMPANION: ("비견", "比肩", "Companion"),
    TenGod.ROB_WEALTH: ("겁재", "劫財", "Rob Wealth"),
    TenGod.EATING_GOD: ("식신", "食神", "Eating God"),
    TenGod.HURTING_OFFICER: ("상관", "傷官", "Hurting Officer"),
    TenGod.INDIRECT_WEALTH: ("편재", "偏財", "Indirect Wealth"),
    TenGod.DIRECT_WEALTH: ("정재", "正財", "Direct Wealth"),
    TenGod.SEVEN_KILLINGS: ("편관", "偏官", "Seven Killings"),
    TenGod.DIRECT_OFFICER: ("정관", "正官", "Direct Officer"),
    TenGod.INDIRECT_SEAL: ("편인", "偏印", "Indirect Seal"),
    TenGod.DIRECT_SEAL: ("정인", "正印", "Direct Seal"),
    TenGod.DAY_MASTER: ("일간", "日干", "Day Master"),
}

# The ten relational categories, without the Day Master marker
TEN_GODS = tuple(g for g in TenGod if g is not TenGod.DAY_MASTER)

# (relationship, same_polarity): ten god
_TEN_GOD_TABLE = {
    ("same", True): TenGod.COMPANION,
    ("same", False): TenGod.ROB_WEALTH,
    ("i_produce", True): TenGod.EATING_GOD,
    ("i_produce", False): TenGod.HURTING_OFFICER,
    ("i_control", True): TenGod.INDIRECT_WEALTH,
    ("i_control", False): TenGod.DIRECT_WEALTH,
    ("controls_me", True): TenGod.SEVEN_KILLINGS,
    ("controls_me", False): TenGod.DIRECT_OFFICER,
    ("produces_me", True): TenGod.INDIRECT_SEAL,
    ("produces_me", False): TenGod.DIRECT_SEAL,
}

QI_ROLES = ("main", "middle", "residual")


def element_relationship(day_master_element: Element, other_element: Element) -> str:
    """Determine the elemental relationship from DM's perspective."""
    if day_master_element == other_element:
        return "same"
    if GENERATES[day_master_element] == other_element:
        return "i_produce"
    if CONTROLS[day_master_element] == other_element:
        return "i_control"
    if CONTROLS[other_element] == day_master_element:
        return "controls_me"
    # Five elements: whatever is left produces the Day Master
    return "produces_me"


def ten_god(day_master, other) -> TenGod:
    """
    Determine the Ten God relationship between the Day Master and another stem.

    A stem measured against itself is a Companion. The Day Master
    marker is assigned by position (the day stem), see analyze_ten_gods.
    """
    dm, stem = to_stem(day_master), to_stem(other)
    relationship = element_relationship(dm.element, stem.element)
    return _TEN_GOD_TABLE[(relationship, dm.polarity == stem.polarity)]


def ten_god_for_branch(day_master, branch) -> TenGod:
    """Ten God of a branch, read from its main-qi hidden stem."""
    return ten_god(day_master, to_branch(branch).hidden_stems[0])


@dataclass(frozen=True)
class HiddenStemGod:
    stem: Stem
    ten_god: TenGod
    role: str  # main / middle / residual


def ten_gods_for_branch(day_master, branch) -> tuple:
    """Ten God of each hidden stem in a branch, main qi first."""
    return tuple(
        HiddenStemGod(stem, ten_god(day_master, stem), QI_ROLES[i])
        for i, stem in enumerate(to_branch(branch).hidden_stems)
    )


@dataclass(frozen=True)
class PillarTenGods:
    pillar: Pillar
    stem_god: TenGod
    branch_god: TenGod
    hidden: tuple  # of HiddenStemGod


@dataclass(frozen=True)
class FourPillarsTenGods:
    year: PillarTenGods
    month: PillarTenGods
    day: PillarTenGods
    hour: PillarTenGods
    day_master: Stem

    def positions(self):
        return (("year", self.year), ("month", self.month),
                ("day", self.day), ("hour", self.hour))


def _analyze_pillar(day_master: Stem, pillar: Pillar, is_day: bool = False) -> PillarTenGods:
    return PillarTenGods(
        pillar=pillar,
        stem_god=TenGod.DAY_MASTER if is_day else ten_god(day_master, pillar.stem),
        branch_god=ten_god_for_branch(day_master, pillar.branch),
        hidden=ten_gods_for_branch(day_master, pillar.branch),
    )


def analyze_ten_gods(year, month, day, hour) -> FourPillarsTenGods:
    """
    Map Ten Gods for all visible stems in the chart.
    Also maps hidden stems within each branch.

    Args:
        year, month, day, hour: Pillar objects or two-character strings
    """
    year, month, day, hour = (as_pillar(p) for p in (year, month, day, hour))
    dm = day.stem
    return FourPillarsTenGods(
        year=_analyze_pillar(dm, year),
        month=_analyze_pillar(dm, month),
        day=_analyze_pillar(dm, day, is_day=True),
        hour=_analyze_pillar(dm, hour),
        day_master=dm,
    )


def count_ten_gods(analysis: FourPillarsTenGods) -> dict:
    """
    Occurrences of each Ten God across the chart.

    Counts the three visible stems other than the Day Master plus every
    hidden stem of the four branches.
    """
    counts = {g: 0 for g in TEN_GODS}
    for _, p in analysis.positions():
        if p.stem_god is not TenGod.DAY_MASTER:
            counts[p.stem_god] += 1
        for h in p.hidden:
            counts[h.ten_god] += 1
    return counts


def count_elements(analysis: FourPillarsTenGods) -> dict:
    """Element occurrences over the four visible stems and all hidden stems."""
    counts = {e: 0 for e in ELEMENTS}
    for _, p in analysis.positions():
        counts[p.pillar.stem.element] += 1
        for h in p.hidden:
            counts[h.stem.element] += 1
    return counts
