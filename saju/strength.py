"""
Day Master strength (身強 / 身弱) scoring.

Three classical factors feed a weighted score:
- 得令 seasonal command: how much the month branch supports the Day Master
- 得地 rooting: Day Master roots in the day and hour branches
- 得勢 allies: visible stems that help the Day Master

The score is then cut into nine ordered bands from 極弱 to 極旺.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from saju.cycle import GENERATED_BY, Branch, Element, Stem, as_pillar, to_branch, to_stem
from saju.ten_gods import TenGod, ten_god

logger = logging.getLogger(__name__)


class StrengthLevel(Enum):
    EXTREMELY_WEAK = "extremely_weak"
    VERY_WEAK = "very_weak"
    WEAK = "weak"
    NEUTRAL_WEAK = "neutral_weak"
    NEUTRAL = "neutral"
    NEUTRAL_STRONG = "neutral_strong"
    STRONG = "strong"
    VERY_STRONG = "very_strong"
    EXTREMELY_STRONG = "extremely_strong"

    @property
    def rank(self) -> int:
        return STRENGTH_LEVELS.index(self)

    @property
    def korean(self) -> str:
        return _LEVEL_LABELS[self][0]

    @property
    def hanja(self) -> str:
        return _LEVEL_LABELS[self][1]

    def __lt__(self, other):
        if not isinstance(other, StrengthLevel):
            return NotImplemented
        return self.rank < other.rank


STRENGTH_LEVELS = tuple(StrengthLevel)

_LEVEL_LABELS = {
    StrengthLevel.EXTREMELY_WEAK: ("극약", "極弱"),
    StrengthLevel.VERY_WEAK: ("태약", "太弱"),
    StrengthLevel.WEAK: ("신약", "身弱"),
    StrengthLevel.NEUTRAL_WEAK: ("중화신약", "中和身弱"),
    StrengthLevel.NEUTRAL: ("중화", "中和"),
    StrengthLevel.NEUTRAL_STRONG: ("중화신강", "中和身強"),
    StrengthLevel.STRONG: ("신강", "身強"),
    StrengthLevel.VERY_STRONG: ("태강", "太強"),
    StrengthLevel.EXTREMELY_STRONG: ("극왕", "極旺"),
}

# Upper score bound (inclusive) of each band; anything above is EXTREMELY_STRONG
_LEVEL_THRESHOLDS = (
    (10, StrengthLevel.EXTREMELY_WEAK),
    (20, StrengthLevel.VERY_WEAK),
    (30, StrengthLevel.WEAK),
    (38, StrengthLevel.NEUTRAL_WEAK),
    (45, StrengthLevel.NEUTRAL),
    (55, StrengthLevel.NEUTRAL_STRONG),
    (70, StrengthLevel.STRONG),
    (85, StrengthLevel.VERY_STRONG),
)

BALANCED_LEVELS = frozenset({
    StrengthLevel.NEUTRAL_WEAK, StrengthLevel.NEUTRAL, StrengthLevel.NEUTRAL_STRONG,
})


def level_for_score(score: float) -> StrengthLevel:
    for upper, level in _LEVEL_THRESHOLDS:
        if score <= upper:
            return level
    return StrengthLevel.EXTREMELY_STRONG


# ============================================================
# WEIGHT TABLES
# ============================================================

# Hidden stem weights: main / middle / residual qi
HIDDEN_STEM_WEIGHTS = {
    Branch.ZI: ((Stem.GUI, 1.0),),
    Branch.CHOU: ((Stem.JI, 0.6), (Stem.GUI, 0.25), (Stem.XIN, 0.15)),
    Branch.YIN: ((Stem.JIA, 0.6), (Stem.BING, 0.25), (Stem.WU, 0.15)),
    Branch.MAO: ((Stem.YI, 1.0),),
    Branch.CHEN: ((Stem.WU, 0.6), (Stem.YI, 0.25), (Stem.GUI, 0.15)),
    Branch.SI: ((Stem.BING, 0.6), (Stem.GENG, 0.25), (Stem.WU, 0.15)),
    Branch.WU: ((Stem.DING, 0.7), (Stem.JI, 0.3)),
    Branch.WEI: ((Stem.JI, 0.6), (Stem.DING, 0.25), (Stem.YI, 0.15)),
    Branch.SHEN: ((Stem.GENG, 0.6), (Stem.REN, 0.25), (Stem.WU, 0.15)),
    Branch.YOU: ((Stem.XIN, 1.0),),
    Branch.XU: ((Stem.WU, 0.6), (Stem.XIN, 0.25), (Stem.DING, 0.15)),
    Branch.HAI: ((Stem.REN, 0.7), (Stem.JIA, 0.3)),
}

# Season of each month branch. Earth months split wet (辰丑) and dry (未戌).
MONTH_BRANCH_SEASON = {
    Branch.YIN: "wood",
    Branch.MAO: "wood",
    Branch.CHEN: "wet_earth",
    Branch.SI: "fire",
    Branch.WU: "fire",
    Branch.WEI: "dry_earth",
    Branch.SHEN: "metal",
    Branch.YOU: "metal",
    Branch.XU: "dry_earth",
    Branch.HAI: "water",
    Branch.ZI: "water",
    Branch.CHOU: "wet_earth",
}

# Day Master element → season → multiplier in [0, 1]
SEASONAL_STRENGTH = {
    Element.WOOD: {"wood": 1.0, "fire": 0.3, "wet_earth": 0.5, "dry_earth": 0.2, "metal": 0.1, "water": 0.7},
    Element.FIRE: {"wood": 0.7, "fire": 1.0, "wet_earth": 0.3, "dry_earth": 0.5, "metal": 0.1, "water": 0.1},
    Element.EARTH: {"wood": 0.1, "fire": 0.7, "wet_earth": 0.8, "dry_earth": 1.0, "metal": 0.3, "water": 0.1},
    Element.METAL: {"wood": 0.1, "fire": 0.1, "wet_earth": 0.5, "dry_earth": 0.7, "metal": 1.0, "water": 0.3},
    Element.WATER: {"wood": 0.3, "fire": 0.1, "wet_earth": 0.2, "dry_earth": 0.1, "metal": 0.7, "water": 1.0},
}

HELPFUL_TEN_GODS = frozenset({
    TenGod.COMPANION, TenGod.ROB_WEALTH, TenGod.DIRECT_SEAL, TenGod.INDIRECT_SEAL,
})
WEAKENING_TEN_GODS = frozenset({
    TenGod.EATING_GOD, TenGod.HURTING_OFFICER, TenGod.INDIRECT_WEALTH,
    TenGod.DIRECT_WEALTH, TenGod.SEVEN_KILLINGS, TenGod.DIRECT_OFFICER,
})

# Score weights
_W_SEASON = 35
_W_ROOT = 20
_W_TRANSPARENT = 15
_W_ALLY = 8
_W_HELP = 5
_W_WEAKEN = 6


def seasonal_multiplier(element, month_branch) -> float:
    """得令: support the month branch gives to an element, 0.1 to 1.0."""
    if isinstance(element, str):
        element = Element(element)
    return SEASONAL_STRENGTH[element][MONTH_BRANCH_SEASON[to_branch(month_branch)]]


def root_strength(day_master, branch) -> float:
    """
    通根: how firmly the Day Master roots in one branch.

    Same-element hidden stems count fully (0.7 if polarity differs),
    hidden stems of the generating element count half.
    """
    dm = to_stem(day_master)
    resource = GENERATED_BY[dm.element]
    strength = 0.0
    for stem, weight in HIDDEN_STEM_WEIGHTS[to_branch(branch)]:
        if stem.element == dm.element:
            strength += weight * (1.0 if stem.polarity == dm.polarity else 0.7)
        elif stem.element == resource:
            strength += weight * 0.5
    return strength


@dataclass(frozen=True)
class StrengthFactors:
    seasonal_command: float   # 得令, 0-1
    rooting: float            # 得地, roots in day + hour branches
    allies: int               # 得勢, helpful visible stems
    total_root: float         # 通根, roots across all four branches
    help_count: int
    weaken_count: int
    transparent_bonus: float = 0.0


@dataclass(frozen=True)
class StrengthResult:
    level: StrengthLevel
    score: float
    factors: StrengthFactors
    description: str
    day_master: Stem


def _season_label(multiplier: float) -> str:
    if multiplier >= 0.7:
        return "득령"
    if multiplier >= 0.4:
        return "반득령"
    return "실령"


def analyze_strength(year, month, day, hour) -> StrengthResult:
    """
    Score the Day Master's strength.

    score = 35·得令 + 20·通根 + 15·透出 + 8·得勢 + 5·help − 6·weaken

    Args:
        year, month, day, hour: Pillar objects or two-character strings
    """
    year, month, day, hour = (as_pillar(p) for p in (year, month, day, hour))
    dm = day.stem
    branches = (year.branch, month.branch, day.branch, hour.branch)
    visible = {year.stem, month.stem, day.stem, hour.stem}
    other_stems = (year.stem, month.stem, hour.stem)

    season = seasonal_multiplier(dm.element, month.branch)
    total_root = sum(root_strength(dm, b) for b in branches)
    rooting = root_strength(dm, day.branch) + root_strength(dm, hour.branch)

    # Month hidden stems that surface as visible stems (透出)
    transparent = sum(
        weight * 0.3
        for stem, weight in HIDDEN_STEM_WEIGHTS[month.branch]
        if stem in visible and ten_god(dm, stem) in HELPFUL_TEN_GODS
    )

    stem_gods = [ten_god(dm, s) for s in other_stems]
    branch_gods = [ten_god(dm, HIDDEN_STEM_WEIGHTS[b][0][0]) for b in branches]
    allies = sum(1 for g in stem_gods if g in HELPFUL_TEN_GODS)
    help_count = sum(1 for g in stem_gods + branch_gods if g in HELPFUL_TEN_GODS)
    weaken_count = sum(1 for g in stem_gods + branch_gods if g in WEAKENING_TEN_GODS)

    score = (season * _W_SEASON
             + total_root * _W_ROOT
             + transparent * _W_TRANSPARENT
             + allies * _W_ALLY
             + help_count * _W_HELP
             - weaken_count * _W_WEAKEN)
    score = round(score, 1)
    level = level_for_score(score)

    description = (f"일간 {dm.value}({dm.element.value}), "
                   f"{_season_label(season)}({round(season * 100)}%)")
    if total_root > 0:
        description += f", 통근({round(total_root, 2)})"
    if allies > 0:
        description += f", 득세({allies})"

    logger.debug("Strength of %s: score %.1f → %s", dm.value, score, level.value)

    return StrengthResult(
        level=level,
        score=score,
        factors=StrengthFactors(
            seasonal_command=round(season, 2),
            rooting=round(rooting, 2),
            allies=allies,
            total_root=round(total_root, 2),
            help_count=help_count,
            weaken_count=weaken_count,
            transparent_bonus=round(transparent, 2),
        ),
        description=description,
        day_master=dm,
    )
