"""
Closed symbol alphabets of the sexagenary system.

Holds the ten Heavenly Stems, the twelve Earthly Branches, the five
elements and the two directed element cycles. Everything here is built
once at import time and never modified.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from bazi_engine.errors import InvalidInput


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    # Declaration order is the fixed tie-break order for element rankings
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return f"{self.chinese} {self.pinyin} ({self.polarity.value} {self.element.value})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element  # primary/season element
    polarity: Polarity
    index: int  # 0-11 in the cycle
    hidden_stems: tuple[str, ...]  # chinese hidden stems [main_qi, middle_qi, residual_qi]
    representative_stem: str  # one stem standing in for the whole branch

    def __str__(self):
        return f"{self.chinese} {self.pinyin} ({self.animal})"


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0,
                  ("癸",), "癸"),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1,
                  ("己", "癸", "辛"), "戊"),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2,
                  ("甲", "丙", "戊"), "甲"),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3,
                  ("乙",), "甲"),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4,
                  ("戊", "乙", "癸"), "戊"),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5,
                  ("丙", "戊", "庚"), "丙"),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6,
                  ("丁", "己"), "丙"),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7,
                  ("己", "丁", "乙"), "戊"),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8,
                  ("庚", "壬", "戊"), "庚"),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9,
                  ("辛",), "庚"),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10,
                  ("戊", "辛", "丁"), "戊"),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11,
                  ("壬", "甲"), "壬"),
)

# Lookup helpers. Pinyin is kept in separate tables because "Wu" names
# both a stem (戊) and a branch (午).
STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
STEM_BY_PINYIN = {s.pinyin: s for s in HEAVENLY_STEMS}
BRANCH_BY_CHINESE = {b.chinese: b for b in EARTHLY_BRANCHES}
BRANCH_BY_PINYIN = {b.pinyin: b for b in EARTHLY_BRANCHES}


# ============================================================
# FIVE ELEMENT CYCLES
# ============================================================

# Generating cycle: Wood → Fire → Earth → Metal → Water → Wood
GENERATES = {
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
}

# Overcoming cycle: Wood → Earth → Water → Fire → Metal → Wood
OVERCOMES = {
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
}

GENERATED_BY = {child: parent for parent, child in GENERATES.items()}
OVERCOME_BY = {target: source for source, target in OVERCOMES.items()}


def stem_of(symbol: Union[str, HeavenlyStem]) -> HeavenlyStem:
    """
    Resolve a stem from its Chinese symbol, pinyin, or an existing instance.

    Raises:
        InvalidInput: if the symbol is not one of the ten stems
    """
    if isinstance(symbol, HeavenlyStem):
        return symbol
    if isinstance(symbol, str):
        stem = STEM_BY_CHINESE.get(symbol) or STEM_BY_PINYIN.get(symbol)
        if stem is not None:
            return stem
    raise InvalidInput(f"Unknown heavenly stem: {symbol!r}")


def branch_of(symbol: Union[str, EarthlyBranch]) -> EarthlyBranch:
    """
    Resolve a branch from its Chinese symbol, pinyin, or an existing instance.

    Raises:
        InvalidInput: if the symbol is not one of the twelve branches
    """
    if isinstance(symbol, EarthlyBranch):
        return symbol
    if isinstance(symbol, str):
        branch = BRANCH_BY_CHINESE.get(symbol) or BRANCH_BY_PINYIN.get(symbol)
        if branch is not None:
            return branch
    raise InvalidInput(f"Unknown earthly branch: {symbol!r}")


def sexagenary_label(index: int) -> str:
    """Two-symbol label for a position 0-59 in the sexagenary cycle (0 = 甲子)."""
    index %= 60
    return HEAVENLY_STEMS[index % 10].chinese + EARTHLY_BRANCHES[index % 12].chinese
