"""
Yongshen (用神): the useful element that balances the chart.

Two methods:
- 억부 (support / restrain): feed a weak Day Master, drain or check a strong one
- 조후 (seasonal adjustment): warm a cold chart, cool a hot one, judged by
  the month branch's season

Near-balanced charts use 조후; everything else uses 억부. Elements that
work against the chosen Yongshen are flagged as Kishen (忌神).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from saju.cycle import (
    CONTROLLED_BY, CONTROLS, ELEMENTS, GENERATED_BY, GENERATES, Branch, Element,
    as_pillar,
)
from saju.strength import BALANCED_LEVELS, StrengthLevel, StrengthResult, analyze_strength
from saju.ten_gods import analyze_ten_gods, count_elements

logger = logging.getLogger(__name__)


class YongShenMethod(Enum):
    SUPPORT_RESTRAIN = "억부"
    SEASONAL_ADJUSTMENT = "조후"


SEASONS = {
    "spring": (Branch.YIN, Branch.MAO, Branch.CHEN),
    "summer": (Branch.SI, Branch.WU, Branch.WEI),
    "autumn": (Branch.SHEN, Branch.YOU, Branch.XU),
    "winter": (Branch.HAI, Branch.ZI, Branch.CHOU),
}

WO, FI, EA, ME, WA = Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER

# season → Day Master element → (primary, secondary) seasonal adjustment
JOHU_YONGSHEN = {
    "spring": {WO: (FI, WA), FI: (WA, WO), EA: (FI, WO), ME: (FI, EA), WA: (FI, ME)},
    "summer": {WO: (WA, ME), FI: (WA, ME), EA: (WA, ME), ME: (WA, EA), WA: (ME, WA)},
    "autumn": {WO: (WA, FI), FI: (WO, EA), EA: (FI, WA), ME: (FI, WA), WA: (FI, ME)},
    "winter": {WO: (FI, EA), FI: (WO, EA), EA: (FI, WO), ME: (FI, EA), WA: (FI, EA)},
}

del WO, FI, EA, ME, WA


def season_of(month_branch: Branch) -> str:
    for season, branches in SEASONS.items():
        if month_branch in branches:
            return season
    raise KeyError(month_branch)


@dataclass(frozen=True)
class ElementRole:
    is_yongshen: bool = False
    is_kishen: bool = False


@dataclass(frozen=True)
class YongShenResult:
    primary: Element
    secondary: Optional[Element]
    method: YongShenMethod
    reasoning: tuple
    elements: dict  # Element → ElementRole
    johu_adjustment: tuple  # seasonal pair that was considered
    season: str = ""


def analyze_yongshen(year, month, day, hour, strength: Optional[StrengthResult] = None) -> YongShenResult:
    """
    Choose the Yongshen for a chart.

    Args:
        year, month, day, hour: Pillar objects or two-character strings
        strength: reuse an existing strength analysis instead of recomputing
    """
    year, month, day, hour = (as_pillar(p) for p in (year, month, day, hour))
    if strength is None:
        strength = analyze_strength(year, month, day, hour)

    dm = day.stem
    dm_element = dm.element
    season = season_of(month.branch)
    johu = JOHU_YONGSHEN[season][dm_element]
    counts = count_elements(analyze_ten_gods(year, month, day, hour))
    level = strength.level

    reasoning = [
        f"일간 {dm.value}({dm_element.value}), {level.korean} (score {strength.score})",
        f"월지 {month.branch.value}: {season}",
    ]

    if level in BALANCED_LEVELS:
        method = YongShenMethod.SEASONAL_ADJUSTMENT
        primary, secondary = johu
        reasoning.append(f"중화에 가까워 조후용신 적용: {season}의 {dm_element.value} 일간에 "
                         f"{primary.value}, 보조 {secondary.value}")
        kishen = {CONTROLLED_BY[primary], CONTROLLED_BY[secondary]}
    elif StrengthLevel.NEUTRAL < level:
        method = YongShenMethod.SUPPORT_RESTRAIN
        output, officer = GENERATES[dm_element], CONTROLLED_BY[dm_element]
        # The less represented of the two does the most good
        if counts[officer] < counts[output]:
            primary, secondary = officer, output
        else:
            primary, secondary = output, officer
        reasoning.append(f"{level.korean}: 설기·극제 필요. "
                         f"{output.value} {counts[output]}개, {officer.value} {counts[officer]}개 → "
                         f"{primary.value}")
        kishen = {dm_element, GENERATED_BY[dm_element]}
    else:
        method = YongShenMethod.SUPPORT_RESTRAIN
        primary, secondary = GENERATED_BY[dm_element], dm_element
        reasoning.append(f"{level.korean}: 부조 필요. 인성 {primary.value}, 비겁 {secondary.value}")
        kishen = {CONTROLS[dm_element], CONTROLLED_BY[dm_element]}

    if method is YongShenMethod.SUPPORT_RESTRAIN:
        if primary == johu[0]:
            reasoning.append(f"억부와 조후({johu[0].value}) 일치")
        else:
            reasoning.append(f"조후({johu[0].value})도 고려")

    chosen = {primary, secondary}
    elements = {
        e: ElementRole(is_yongshen=e in chosen, is_kishen=e in kishen and e not in chosen)
        for e in ELEMENTS
    }

    logger.debug("Yongshen for %s: %s / %s via %s",
                 dm.value, primary.value, secondary.value, method.value)

    return YongShenResult(
        primary=primary,
        secondary=secondary,
        method=method,
        reasoning=tuple(reasoning),
        elements=elements,
        johu_adjustment=johu,
        season=season,
    )


# ============================================================
# RECOMMENDATIONS
# ============================================================

ELEMENT_ASSOCIATIONS = {
    Element.WOOD: {"colors": ("청색", "녹색"), "direction": "동", "numbers": (3, 8)},
    Element.FIRE: {"colors": ("적색", "자주색"), "direction": "남", "numbers": (2, 7)},
    Element.EARTH: {"colors": ("황색", "갈색"), "direction": "중앙", "numbers": (5, 10)},
    Element.METAL: {"colors": ("백색", "금색"), "direction": "서", "numbers": (4, 9)},
    Element.WATER: {"colors": ("흑색", "남색"), "direction": "북", "numbers": (1, 6)},
}


def element_recommendations(result: YongShenResult) -> dict:
    """Colors, directions and numbers associated with the Yongshen elements."""
    colors, directions, numbers = [], [], set()
    for element in (result.primary, result.secondary):
        if element is None:
            continue
        data = ELEMENT_ASSOCIATIONS[element]
        colors.extend(c for c in data["colors"] if c not in colors)
        if data["direction"] not in directions:
            directions.append(data["direction"])
        numbers.update(data["numbers"])
    return {
        "colors": colors,
        "directions": directions,
        "numbers": sorted(numbers),
    }
