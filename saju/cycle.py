"""
Sexagenary (Ganzhi) cycle arithmetic.

Handles:
- The ten Heavenly Stems and twelve Earthly Branches as closed enums
- Element / polarity / hidden-stem tables
- Pillar values and the 0-59 cycle index in both directions
- Julian Day Number and the day / year cycle offsets

Every other module builds on these tables. Nothing here touches time zones
or the ephemeris.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from saju.errors import InvalidSymbol


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def korean(self) -> str:
        return _ELEMENT_LABELS[self][0]

    @property
    def hanja(self) -> str:
        return _ELEMENT_LABELS[self][1]


_ELEMENT_LABELS = {
    Element.WOOD: ("목", "木"),
    Element.FIRE: ("화", "火"),
    Element.EARTH: ("토", "土"),
    Element.METAL: ("금", "金"),
    Element.WATER: ("수", "水"),
}


class Stem(Enum):
    JIA = "甲"
    YI = "乙"
    BING = "丙"
    DING = "丁"
    WU = "戊"
    JI = "己"
    GENG = "庚"
    XIN = "辛"
    REN = "壬"
    GUI = "癸"

    @property
    def index(self) -> int:
        return _STEM_INDEX[self]

    @property
    def element(self) -> Element:
        return _STEM_ELEMENTS[self.index // 2]

    @property
    def polarity(self) -> Polarity:
        return Polarity.YANG if self.index % 2 == 0 else Polarity.YIN

    @property
    def pinyin(self) -> str:
        return self.name.capitalize()

    @property
    def korean(self) -> str:
        return "갑을병정무기경신임계"[self.index]

    def __str__(self):
        return f"{self.value} {self.pinyin} ({self.polarity.value} {self.element.value})"


class Branch(Enum):
    ZI = "子"
    CHOU = "丑"
    YIN = "寅"
    MAO = "卯"
    CHEN = "辰"
    SI = "巳"
    WU = "午"
    WEI = "未"
    SHEN = "申"
    YOU = "酉"
    XU = "戌"
    HAI = "亥"

    @property
    def index(self) -> int:
        return _BRANCH_INDEX[self]

    @property
    def element(self) -> Element:
        return _BRANCH_ELEMENTS[self]

    @property
    def polarity(self) -> Polarity:
        return Polarity.YANG if self.index % 2 == 0 else Polarity.YIN

    @property
    def pinyin(self) -> str:
        return self.name.capitalize()

    @property
    def korean(self) -> str:
        return "자축인묘진사오미신유술해"[self.index]

    @property
    def animal(self) -> str:
        return _ANIMALS[self.index]

    @property
    def hidden_stems(self) -> tuple:
        """Hidden stems, main qi first (main, middle, residual)."""
        return HIDDEN_STEMS[self]

    def __str__(self):
        return f"{self.value} {self.pinyin} ({self.animal})"


STEMS = tuple(Stem)
BRANCHES = tuple(Branch)

_STEM_INDEX = {s: i for i, s in enumerate(STEMS)}
_BRANCH_INDEX = {b: i for i, b in enumerate(BRANCHES)}

# Stems pair up by element: 甲乙 wood, 丙丁 fire, 戊己 earth, 庚辛 metal, 壬癸 water
_STEM_ELEMENTS = (Element.WOOD, Element.FIRE, Element.EARTH, Element.METAL, Element.WATER)

_BRANCH_ELEMENTS = {
    Branch.ZI: Element.WATER,
    Branch.CHOU: Element.EARTH,
    Branch.YIN: Element.WOOD,
    Branch.MAO: Element.WOOD,
    Branch.CHEN: Element.EARTH,
    Branch.SI: Element.FIRE,
    Branch.WU: Element.FIRE,
    Branch.WEI: Element.EARTH,
    Branch.SHEN: Element.METAL,
    Branch.YOU: Element.METAL,
    Branch.XU: Element.EARTH,
    Branch.HAI: Element.WATER,
}

_ANIMALS = ("Rat", "Ox", "Tiger", "Rabbit", "Dragon", "Snake",
            "Horse", "Goat", "Monkey", "Rooster", "Dog", "Pig")

HIDDEN_STEMS = {
    Branch.ZI: (Stem.GUI,),
    Branch.CHOU: (Stem.JI, Stem.GUI, Stem.XIN),
    Branch.YIN: (Stem.JIA, Stem.BING, Stem.WU),
    Branch.MAO: (Stem.YI,),
    Branch.CHEN: (Stem.WU, Stem.YI, Stem.GUI),
    Branch.SI: (Stem.BING, Stem.GENG, Stem.WU),
    Branch.WU: (Stem.DING, Stem.JI),
    Branch.WEI: (Stem.JI, Stem.DING, Stem.YI),
    Branch.SHEN: (Stem.GENG, Stem.REN, Stem.WU),
    Branch.YOU: (Stem.XIN,),
    Branch.XU: (Stem.WU, Stem.XIN, Stem.DING),
    Branch.HAI: (Stem.REN, Stem.JIA),
}

ELEMENTS = tuple(Element)

# Production cycle: Wood → Fire → Earth → Metal → Water → Wood
GENERATES = {
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
}

# Control cycle: Wood → Earth → Water → Fire → Metal → Wood
CONTROLS = {
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
}

GENERATED_BY = {v: k for k, v in GENERATES.items()}
CONTROLLED_BY = {v: k for k, v in CONTROLS.items()}


# ============================================================
# INDEX ARITHMETIC
# ============================================================

def normalize(n: int, m: int) -> int:
    """Wrap n into [0, m). Used for every cyclic index in the package."""
    return ((n % m) + m) % m


def _lookup(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
        member = enum_cls.__members__.get(value.upper())
        if member is not None:
            return member
    return None


def stem_index(symbol: Union[Stem, str]) -> int:
    """Index 0-9 of a stem, or -1 when the symbol is not a stem."""
    stem = _lookup(Stem, symbol)
    return -1 if stem is None else stem.index


def branch_index(symbol: Union[Branch, str]) -> int:
    """Index 0-11 of a branch, or -1 when the symbol is not a branch."""
    branch = _lookup(Branch, symbol)
    return -1 if branch is None else branch.index


def to_stem(value: Union[Stem, str, int]) -> Stem:
    """Coerce a Stem, hanzi/pinyin string or 0-9 index to a Stem."""
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < 10:
            return STEMS[value]
        raise InvalidSymbol(f"Stem index out of range: {value}")
    stem = _lookup(Stem, value)
    if stem is None:
        raise InvalidSymbol(f"Invalid stem: {value!r}")
    return stem


def to_branch(value: Union[Branch, str, int]) -> Branch:
    """Coerce a Branch, hanzi/pinyin string or 0-11 index to a Branch."""
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < 12:
            return BRANCHES[value]
        raise InvalidSymbol(f"Branch index out of range: {value}")
    branch = _lookup(Branch, value)
    if branch is None:
        raise InvalidSymbol(f"Invalid branch: {value!r}")
    return branch


# ============================================================
# PILLARS
# ============================================================

@dataclass(frozen=True)
class Pillar:
    """
    A (stem, branch) pair.

    Only pairs with matching parity belong to the sexagenary cycle
    (see is_valid). Other pairs can still be built so that relation
    tables can be run over arbitrary stems and branches, but they have
    no cycle index.
    """
    stem: Stem
    branch: Branch

    def __post_init__(self):
        object.__setattr__(self, "stem", to_stem(self.stem))
        object.__setattr__(self, "branch", to_branch(self.branch))

    @classmethod
    def parse(cls, text: str) -> "Pillar":
        if not isinstance(text, str) or len(text) != 2:
            raise InvalidSymbol(f"Pillar must be two characters (stem + branch): {text!r}")
        return cls(text[0], text[1])

    @property
    def is_valid(self) -> bool:
        return self.stem.index % 2 == self.branch.index % 2

    @property
    def index(self) -> int:
        return pillar_index(self)

    def __str__(self):
        return self.stem.value + self.branch.value

    def to_dict(self):
        return {
            "pillar": str(self),
            "stem": {
                "chinese": self.stem.value,
                "pinyin": self.stem.pinyin,
                "korean": self.stem.korean,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.value,
                "pinyin": self.branch.pinyin,
                "korean": self.branch.korean,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
                "hidden_stems": [s.value for s in self.branch.hidden_stems],
            },
        }


def as_pillar(value) -> Pillar:
    """Accept a Pillar, a two-character string or a cycle index."""
    if isinstance(value, Pillar):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return pillar_from_index(value)
    if isinstance(value, str):
        return Pillar.parse(value)
    if isinstance(value, tuple) and len(value) == 2:
        return Pillar(value[0], value[1])
    raise InvalidSymbol(f"Cannot interpret {value!r} as a pillar")


def pillar_from_index(idx60: int) -> Pillar:
    """Pillar at a cycle position. Any integer is accepted (mod 60)."""
    n = normalize(idx60, 60)
    return Pillar(STEMS[n % 10], BRANCHES[n % 12])


def pillar_index(pillar) -> int:
    """Cycle index 0-59 of a valid pillar (inverse of pillar_from_index)."""
    p = as_pillar(pillar)
    if not p.is_valid:
        raise InvalidSymbol(f"{p} is not part of the sexagenary cycle")
    # Chinese remainder over 10 and 12: step the stem-aligned index by 10
    # until the branch lines up; at most six steps.
    s, b = p.stem.index, p.branch.index
    return next(i for i in range(s, 60, 10) if i % 12 == b)


# ============================================================
# CALENDAR OFFSETS
# ============================================================

# 1984 (甲子) opens a year cycle
_YEAR_CYCLE_EPOCH = 1984

# (jdn + 49) % 60: JDN 2451545 (2000-01-01) is 戊午 (index 54)
_JDN_SEXAGENARY_OFFSET = 49


def jdn(year: int, month: int, day: int) -> int:
    """Julian Day Number of a proleptic-Gregorian date (noon-based)."""
    a = (14 - month) // 12
    y2 = year + 4800 - a
    m2 = month + 12 * a - 3
    return (day + (153 * m2 + 2) // 5 + 365 * y2
            + y2 // 4 - y2 // 100 + y2 // 400 - 32045)


jdn_from_date = jdn


def day_pillar_index_from_jdn(day_number: int) -> int:
    return normalize(day_number + _JDN_SEXAGENARY_OFFSET, 60)


def year_pillar_index(year: int) -> int:
    return normalize(year - _YEAR_CYCLE_EPOCH, 60)


def year_pillar(year: int) -> Pillar:
    """Pillar of a solar year (the year that starts at Spring Begins)."""
    return pillar_from_index(year_pillar_index(year))


get_year_pillar = year_pillar
