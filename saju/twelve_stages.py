"""
Twelve life stages (十二運星).

Each stem is "born" (長生) in a fixed branch and moves through twelve
stages around the branch wheel: forward for yang stems, backward for
yin stems. Stage 4 (帝旺) is the stem's peak, stage 8 (墓) its storage.
"""

from dataclasses import dataclass
from enum import Enum

from saju.cycle import Branch, Polarity, Stem, as_pillar, normalize, to_branch, to_stem


class TwelveStage(Enum):
    LONG_LIFE = "long_life"
    BATHING = "bathing"
    CROWN_BELT = "crown_belt"
    ESTABLISHMENT = "establishment"
    IMPERIAL = "imperial"
    DECLINE = "decline"
    ILLNESS = "illness"
    DEATH = "death"
    TOMB = "tomb"
    EXTINCTION = "extinction"
    CONCEPTION = "conception"
    NURTURING = "nurturing"

    @property
    def korean(self) -> str:
        return _STAGE_DATA[self][0]

    @property
    def hanja(self) -> str:
        return _STAGE_DATA[self][1]

    @property
    def meaning(self) -> str:
        return _STAGE_DATA[self][2]

    @property
    def strength(self) -> str:
        """strong / neutral / weak"""
        return _STAGE_DATA[self][3]


TWELVE_STAGES = tuple(TwelveStage)

_STAGE_DATA = {
    TwelveStage.LONG_LIFE: ("장생", "長生", "새로운 시작, 성장의 기운", "strong"),
    TwelveStage.BATHING: ("목욕", "沐浴", "불안정, 변화, 도화", "neutral"),
    TwelveStage.CROWN_BELT: ("관대", "冠帶", "성장, 준비, 학업", "strong"),
    TwelveStage.ESTABLISHMENT: ("건록", "建祿", "안정, 직업, 녹봉", "strong"),
    TwelveStage.IMPERIAL: ("제왕", "帝旺", "최고 전성기, 권력", "strong"),
    TwelveStage.DECLINE: ("쇠", "衰", "기운 약화, 후퇴", "weak"),
    TwelveStage.ILLNESS: ("병", "病", "질병, 곤란", "weak"),
    TwelveStage.DEATH: ("사", "死", "끝, 전환점", "weak"),
    TwelveStage.TOMB: ("묘", "墓", "저장, 숨김, 보관", "neutral"),
    TwelveStage.EXTINCTION: ("절", "絶", "단절, 새로운 국면", "weak"),
    TwelveStage.CONCEPTION: ("태", "胎", "잉태, 계획, 구상", "neutral"),
    TwelveStage.NURTURING: ("양", "養", "양육, 준비, 축적", "neutral"),
}

# 長生 branch of each stem
YANG_BIRTH_BRANCH = {
    Stem.JIA: Branch.HAI,
    Stem.BING: Branch.YIN,
    Stem.WU: Branch.YIN,
    Stem.GENG: Branch.SI,
    Stem.REN: Branch.SHEN,
}

YIN_BIRTH_BRANCH = {
    Stem.YI: Branch.WU,
    Stem.DING: Branch.YOU,
    Stem.JI: Branch.YOU,
    Stem.XIN: Branch.ZI,
    Stem.GUI: Branch.MAO,
}


def birth_branch(stem) -> Branch:
    stem = to_stem(stem)
    table = YANG_BIRTH_BRANCH if stem.polarity == Polarity.YANG else YIN_BIRTH_BRANCH
    return table[stem]


def twelve_stage(stem, branch) -> TwelveStage:
    """Stage of a stem in a branch."""
    stem, branch = to_stem(stem), to_branch(branch)
    start = birth_branch(stem).index
    if stem.polarity == Polarity.YANG:
        return TWELVE_STAGES[normalize(branch.index - start, 12)]
    return TWELVE_STAGES[normalize(start - branch.index, 12)]


@dataclass(frozen=True)
class TwelveStagesResult:
    year: TwelveStage
    month: TwelveStage
    day: TwelveStage
    hour: TwelveStage


def analyze_twelve_stages(year, month, day, hour) -> TwelveStagesResult:
    """Stage of the Day Master in each pillar's branch."""
    year, month, day, hour = (as_pillar(p) for p in (year, month, day, hour))
    dm = day.stem
    return TwelveStagesResult(
        year=twelve_stage(dm, year.branch),
        month=twelve_stage(dm, month.branch),
        day=twelve_stage(dm, day.branch),
        hour=twelve_stage(dm, hour.branch),
    )
