"""
Sinsal (神煞) auxiliary stars.

Each star is a lookup: a base symbol of the chart (year or day branch,
month branch, day or year stem) names a target symbol, and every pillar
holding that target carries the star.

A star found from two bases at the same position is reported once.
"""

from dataclasses import dataclass
from enum import Enum

from saju.cycle import as_pillar

POSITIONS = ("year", "month", "day", "hour")


class Sinsal(Enum):
    PEACH_BLOSSOM = "peach_blossom"
    SKY_HORSE = "sky_horse"
    FLOWERY_CANOPY = "flowery_canopy"
    GHOST_GATE = "ghost_gate"
    SOLITARY_STAR = "solitary_star"
    WIDOW_STAR = "widow_star"
    HEAVENLY_VIRTUE = "heavenly_virtue"
    MONTHLY_VIRTUE = "monthly_virtue"
    SKY_NOBLE = "sky_noble"
    MOON_NOBLE = "moon_noble"
    LITERARY_NOBLE = "literary_noble"
    ACADEMIC_HALL = "academic_hall"
    BLOOD_KNIFE = "blood_knife"
    HEAVENLY_DOCTOR = "heavenly_doctor"

    @property
    def korean(self) -> str:
        return SINSAL_INFO[self][0]

    @property
    def hanja(self) -> str:
        return SINSAL_INFO[self][1]

    @property
    def meaning(self) -> str:
        return SINSAL_INFO[self][2]

    @property
    def nature(self) -> str:
        """auspicious / inauspicious / neutral"""
        return SINSAL_INFO[self][3]


SINSAL_INFO = {
    Sinsal.PEACH_BLOSSOM: ("도화살", "桃花煞", "이성 인연, 매력, 색정", "neutral"),
    Sinsal.SKY_HORSE: ("역마살", "驛馬煞", "이동, 변화, 해외", "neutral"),
    Sinsal.FLOWERY_CANOPY: ("화개살", "華蓋煞", "예술, 종교, 고독", "neutral"),
    Sinsal.GHOST_GATE: ("귀문관살", "鬼門關煞", "귀신, 영적 감각, 불안", "inauspicious"),
    Sinsal.SOLITARY_STAR: ("고진살", "孤辰煞", "고독, 독립, 자립", "inauspicious"),
    Sinsal.WIDOW_STAR: ("과숙살", "寡宿煞", "외로움, 배우자 인연 약함", "inauspicious"),
    Sinsal.HEAVENLY_VIRTUE: ("천덕귀인", "天德貴人", "하늘의 덕, 재난 해소", "auspicious"),
    Sinsal.MONTHLY_VIRTUE: ("월덕귀인", "月德貴人", "달의 덕, 흉화 해소", "auspicious"),
    Sinsal.SKY_NOBLE: ("천을귀인", "天乙貴人", "귀인의 도움, 위기 극복", "auspicious"),
    Sinsal.MOON_NOBLE: ("월을귀인", "月乙貴人", "귀인의 도움", "auspicious"),
    Sinsal.LITERARY_NOBLE: ("문창귀인", "文昌貴人", "학업, 시험, 문서", "auspicious"),
    Sinsal.ACADEMIC_HALL: ("학당귀인", "學堂貴人", "학문, 교육, 지식", "auspicious"),
    Sinsal.BLOOD_KNIFE: ("혈인살", "血刃煞", "수술, 출혈, 부상", "inauspicious"),
    Sinsal.HEAVENLY_DOCTOR: ("천의성", "天醫星", "치료, 의료, 건강 회복", "auspicious"),
}


def _table(pairs: str) -> dict:
    """'寅卯 午卯 ...' → {'寅': '卯', '午': '卯', ...}"""
    return {p[0]: p[1:] for p in pairs.split()}


# Three Harmony frames share a target: 寅午戌 / 申子辰 / 巳酉丑 / 亥卯未
PEACH_BLOSSOM = _table("寅卯 午卯 戌卯 申酉 子酉 辰酉 巳午 酉午 丑午 亥子 卯子 未子")
SKY_HORSE = _table("寅申 午申 戌申 申寅 子寅 辰寅 巳亥 酉亥 丑亥 亥巳 卯巳 未巳")
FLOWERY_CANOPY = _table("寅戌 午戌 戌戌 申辰 子辰 辰辰 巳丑 酉丑 丑丑 亥未 卯未 未未")

GHOST_GATE = _table("子卯 丑寅 寅丑 卯子 辰亥 巳戌 午酉 未申 申未 酉午 戌巳 亥辰")
SOLITARY_STAR = _table("子寅 丑寅 寅巳 卯巳 辰巳 巳申 午申 未申 申亥 酉亥 戌亥 亥寅")
WIDOW_STAR = _table("子戌 丑戌 寅丑 卯丑 辰丑 巳辰 午辰 未辰 申未 酉未 戌未 亥戌")
BLOOD_KNIFE = _table("子酉 丑戌 寅亥 卯子 辰丑 巳寅 午卯 未辰 申巳 酉午 戌未 亥申")
HEAVENLY_DOCTOR = _table("子亥 丑子 寅丑 卯寅 辰卯 巳辰 午巳 未午 申未 酉申 戌酉 亥戌")

# Month branch → stem (or branch) carrying the virtue
HEAVENLY_VIRTUE = _table("寅丁 卯申 辰壬 巳辛 午亥 未甲 申癸 酉寅 戌丙 亥乙 子巳 丑庚")
MONTHLY_VIRTUE = _table("寅丙 卯甲 辰壬 巳庚 午丙 未甲 申壬 酉庚 戌丙 亥甲 子壬 丑庚")

# Stem → branch(es)
SKY_NOBLE = _table("甲丑未 戊丑未 庚丑未 乙子申 己子申 丙亥酉 丁亥酉 壬卯巳 癸卯巳 辛午寅")
LITERARY_NOBLE = _table("甲巳 乙午 丙申 丁酉 戊申 己酉 庚亥 辛子 壬寅 癸卯")
ACADEMIC_HALL = _table("甲亥 乙子 丙寅 丁卯 戊寅 己卯 庚巳 辛午 壬申 癸酉")


@dataclass(frozen=True)
class SinsalMatch:
    sinsal: Sinsal
    position: str


@dataclass(frozen=True)
class SinsalResult:
    matches: tuple
    summary: dict  # Sinsal → tuple of positions


def analyze_sinsals(year, month, day, hour) -> SinsalResult:
    pillars = [as_pillar(p) for p in (year, month, day, hour)]
    year, month, day, hour = pillars
    branches = [p.branch.value for p in pillars]
    stems = [p.stem.value for p in pillars]

    # (star, base symbol, table)
    checks = [
        (Sinsal.PEACH_BLOSSOM, year.branch, PEACH_BLOSSOM),
        (Sinsal.PEACH_BLOSSOM, day.branch, PEACH_BLOSSOM),
        (Sinsal.SKY_HORSE, year.branch, SKY_HORSE),
        (Sinsal.SKY_HORSE, day.branch, SKY_HORSE),
        (Sinsal.FLOWERY_CANOPY, year.branch, FLOWERY_CANOPY),
        (Sinsal.FLOWERY_CANOPY, day.branch, FLOWERY_CANOPY),
        (Sinsal.GHOST_GATE, day.branch, GHOST_GATE),
        (Sinsal.SOLITARY_STAR, year.branch, SOLITARY_STAR),
        (Sinsal.WIDOW_STAR, year.branch, WIDOW_STAR),
        (Sinsal.HEAVENLY_VIRTUE, month.branch, HEAVENLY_VIRTUE),
        (Sinsal.MONTHLY_VIRTUE, month.branch, MONTHLY_VIRTUE),
        (Sinsal.SKY_NOBLE, day.stem, SKY_NOBLE),
        (Sinsal.MOON_NOBLE, year.stem, SKY_NOBLE),
        (Sinsal.LITERARY_NOBLE, day.stem, LITERARY_NOBLE),
        (Sinsal.ACADEMIC_HALL, day.stem, ACADEMIC_HALL),
        (Sinsal.BLOOD_KNIFE, day.branch, BLOOD_KNIFE),
        (Sinsal.HEAVENLY_DOCTOR, month.branch, HEAVENLY_DOCTOR),
    ]

    matches = []
    seen = set()
    for sinsal, base, table in checks:
        targets = table.get(base.value, "")
        for i, position in enumerate(POSITIONS):
            # Virtue targets may be stems or branches
            hit = branches[i] in targets or (sinsal in (Sinsal.HEAVENLY_VIRTUE, Sinsal.MONTHLY_VIRTUE)
                                             and stems[i] in targets)
            if hit and (sinsal, position) not in seen:
                seen.add((sinsal, position))
                matches.append(SinsalMatch(sinsal, position))

    summary = {}
    for m in matches:
        summary.setdefault(m.sinsal, []).append(m.position)

    return SinsalResult(
        matches=tuple(matches),
        summary={k: tuple(v) for k, v in summary.items()},
    )
