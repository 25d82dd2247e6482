"""
Ten Gods (十神) analysis.

The Ten Gods describe the relationship between any stem and the Day
Master. They are determined by the elemental relationship plus whether
the two stems share polarity.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from bazi_engine.elements import (
    balance_score,
    dominant_elements,
    round_half_up,
    weak_elements,
)
from bazi_engine.errors import InternalConsistency
from bazi_engine.symbols import (
    GENERATED_BY,
    GENERATES,
    OVERCOME_BY,
    OVERCOMES,
    STEM_BY_CHINESE,
    Element,
    HeavenlyStem,
    stem_of,
)

logger = logging.getLogger(__name__)


# ============================================================
# RELATIONSHIP ALGEBRA
# ============================================================

class ElementRelation(Enum):
    SAME = "same"
    GENERATES_ME = "generates_me"   # other generates DM
    I_GENERATE = "i_generate"       # DM generates other
    OVERCOMES_ME = "overcomes_me"   # other overcomes DM
    I_OVERCOME = "i_overcome"       # DM overcomes other


class TenGod(Enum):
    # Declaration order is the tie-break priority for strength rankings
    DIRECT_RESOURCE = "direct_resource"
    INDIRECT_RESOURCE = "indirect_resource"
    DIRECT_AUTHORITY = "direct_authority"
    AGGRESSIVE_AUTHORITY = "aggressive_authority"
    DIRECT_WEALTH = "direct_wealth"
    WINDFALL_WEALTH = "windfall_wealth"
    DIRECT_OUTPUT = "direct_output"
    REBELLIOUS_OUTPUT = "rebellious_output"
    PEER = "peer"
    PLUNDERER = "plunderer"

    @property
    def relation(self) -> ElementRelation:
        return _RELATION_OF[self]

    @property
    def chinese(self) -> str:
        return _CHINESE_NAMES[self]

    @property
    def label(self) -> str:
        return f"{self.value.replace('_', ' ').title()} ({self.chinese})"


# (relation, same_polarity): ten god
TEN_GODS = {
    (ElementRelation.SAME, True): TenGod.PEER,
    (ElementRelation.SAME, False): TenGod.PLUNDERER,
    (ElementRelation.GENERATES_ME, True): TenGod.DIRECT_RESOURCE,
    (ElementRelation.GENERATES_ME, False): TenGod.INDIRECT_RESOURCE,
    (ElementRelation.I_GENERATE, True): TenGod.DIRECT_OUTPUT,
    (ElementRelation.I_GENERATE, False): TenGod.REBELLIOUS_OUTPUT,
    (ElementRelation.OVERCOMES_ME, True): TenGod.DIRECT_AUTHORITY,
    (ElementRelation.OVERCOMES_ME, False): TenGod.AGGRESSIVE_AUTHORITY,
    (ElementRelation.I_OVERCOME, True): TenGod.DIRECT_WEALTH,
    (ElementRelation.I_OVERCOME, False): TenGod.WINDFALL_WEALTH,
}

_RELATION_OF = {god: relation for (relation, _), god in TEN_GODS.items()}

_CHINESE_NAMES = {
    TenGod.DIRECT_RESOURCE: "正印",
    TenGod.INDIRECT_RESOURCE: "偏印",
    TenGod.DIRECT_AUTHORITY: "正官",
    TenGod.AGGRESSIVE_AUTHORITY: "七杀",
    TenGod.DIRECT_WEALTH: "正财",
    TenGod.WINDFALL_WEALTH: "偏财",
    TenGod.DIRECT_OUTPUT: "食神",
    TenGod.REBELLIOUS_OUTPUT: "伤官",
    TenGod.PEER: "比肩",
    TenGod.PLUNDERER: "劫财",
}

# (influence keywords, description)
TEN_GOD_INFLUENCE = {
    TenGod.DIRECT_RESOURCE: (
        ("learning", "reputation", "mentors", "nurture", "security"),
        "What generates me with matching polarity: learning, reputation and helpful mentors.",
    ),
    TenGod.INDIRECT_RESOURCE: (
        ("craftsmanship", "intuition", "spirituality", "unconventional", "depth"),
        "What generates me with opposite polarity: special skills, intuition and unconventional thinking.",
    ),
    TenGod.DIRECT_AUTHORITY: (
        ("career", "status", "discipline", "responsibility", "dignity"),
        "What overcomes me with matching polarity: career, status and self-discipline.",
    ),
    TenGod.AGGRESSIVE_AUTHORITY: (
        ("power", "challenge", "pressure", "courage", "transformation"),
        "What overcomes me with opposite polarity: power, challenge and courage under pressure.",
    ),
    TenGod.DIRECT_WEALTH: (
        ("wealth", "pragmatism", "stability", "partnership", "moderation"),
        "What I overcome with matching polarity: earned wealth, pragmatism and stability.",
    ),
    TenGod.WINDFALL_WEALTH: (
        ("opportunity", "speculation", "sociability", "fatherhood", "generosity"),
        "What I overcome with opposite polarity: windfalls, opportunity and social ease.",
    ),
    TenGod.DIRECT_OUTPUT: (
        ("expression", "enjoyment", "creativity", "children", "optimism"),
        "What I generate with matching polarity: self-expression, enjoyment and creativity.",
    ),
    TenGod.REBELLIOUS_OUTPUT: (
        ("rebellion", "talent", "critique", "innovation", "emotion"),
        "What I generate with opposite polarity: talent, critical spirit and a rebellious streak.",
    ),
    TenGod.PEER: (
        ("confidence", "independence", "competition", "friendship", "equality"),
        "Same element, same polarity: confidence, independence and relationships among equals.",
    ),
    TenGod.PLUNDERER: (
        ("ambition", "risk-taking", "networking", "siblings", "rivalry"),
        "Same element, opposite polarity: ambition, risk-taking and rivalry among peers.",
    ),
}


def _check_tables():
    missing = [
        (relation.value, same)
        for relation in ElementRelation
        for same in (True, False)
        if (relation, same) not in TEN_GODS
    ]
    if missing or set(TEN_GODS.values()) != set(TenGod):
        raise InternalConsistency(f"Ten Gods table is incomplete: missing {missing}")
    for table in (_CHINESE_NAMES, TEN_GOD_INFLUENCE):
        if set(table) != set(TenGod):
            raise InternalConsistency("Ten Gods lookup tables do not cover every category")


_check_tables()


def element_relationship(day_master_element: Element, other_element: Element) -> ElementRelation:
    """Determine the elemental relationship from DM's perspective."""
    if day_master_element == other_element:
        return ElementRelation.SAME
    if GENERATES.get(other_element) == day_master_element:
        return ElementRelation.GENERATES_ME
    if GENERATES.get(day_master_element) == other_element:
        return ElementRelation.I_GENERATE
    if OVERCOMES.get(other_element) == day_master_element:
        return ElementRelation.OVERCOMES_ME
    if OVERCOMES.get(day_master_element) == other_element:
        return ElementRelation.I_OVERCOME
    raise InternalConsistency(
        f"No element relationship between {day_master_element} and {other_element}"
    )


def classify(day_master: Union[str, HeavenlyStem], target: Union[str, HeavenlyStem]) -> TenGod:
    """
    Determine the Ten God relationship between the Day Master and another stem.

    Args:
        day_master: the Day Master stem (instance, chinese or pinyin)
        target: the stem being evaluated

    Raises:
        InvalidInput: a stem outside the ten-stem alphabet
        InternalConsistency: the pair does not resolve to a Ten God
    """
    dm = stem_of(day_master)
    other = stem_of(target)
    relation = element_relationship(dm.element, other.element)
    key = (relation, dm.polarity == other.polarity)
    if key not in TEN_GODS:
        raise InternalConsistency(f"Unable to determine Ten God for {dm.chinese} -> {other.chinese}")
    return TEN_GODS[key]


def ten_god_element(day_master_element: Element, god: TenGod) -> Element:
    """The element a Ten God category stands for, seen from the Day Master."""
    return {
        ElementRelation.SAME: day_master_element,
        ElementRelation.GENERATES_ME: GENERATED_BY[day_master_element],
        ElementRelation.I_GENERATE: GENERATES[day_master_element],
        ElementRelation.OVERCOMES_ME: OVERCOME_BY[day_master_element],
        ElementRelation.I_OVERCOME: OVERCOMES[day_master_element],
    }[god.relation]


# ============================================================
# CHART ANALYSIS
# ============================================================

VISIBLE_STEM_WEIGHT = 1.0
REPRESENTATIVE_STEM_WEIGHT = 0.5


@dataclass(frozen=True)
class TenGodStrength:
    relationship: TenGod
    strength: int  # 0-100 share of the chart
    element: Element
    description: str
    influence: tuple[str, ...]

    def to_dict(self):
        return {
            "relationship": self.relationship.value,
            "chinese": self.relationship.chinese,
            "strength": self.strength,
            "element": self.element.value,
            "description": self.description,
            "influence": list(self.influence),
        }


@dataclass(frozen=True)
class TenGodsAnalysis:
    day_master_stem: str
    relationships: Mapping[str, TenGod] = field(hash=False)  # "year_stem" ... "hour_stem"
    strengths: tuple[TenGodStrength, ...]
    dominant_elements: tuple[Element, Element]
    weak_elements: tuple[Element, Element]
    balance_score: int

    def __post_init__(self):
        object.__setattr__(self, "relationships", MappingProxyType(dict(self.relationships)))

    def to_dict(self):
        return {
            "day_master_stem": self.day_master_stem,
            "relationships": {pos: god.value for pos, god in self.relationships.items()},
            "strengths": [s.to_dict() for s in self.strengths],
            "dominant_elements": [e.value for e in self.dominant_elements],
            "weak_elements": [e.value for e in self.weak_elements],
            "balance_score": self.balance_score,
        }


def ten_god_strengths(chart) -> tuple[TenGodStrength, ...]:
    """
    Share of each Ten God across the chart, strongest first.

    Visible stems count 1.0; each branch adds 0.5 for its representative
    hidden stem. Ties keep the TenGod declaration order.
    """
    dm = chart.day.stem
    counts = {god: 0.0 for god in TenGod}

    for pillar in chart.pillars:
        counts[classify(dm, pillar.stem)] += VISIBLE_STEM_WEIGHT
        representative = STEM_BY_CHINESE[pillar.branch.representative_stem]
        counts[classify(dm, representative)] += REPRESENTATIVE_STEM_WEIGHT

    total = sum(counts.values())
    strengths = []
    for god, count in counts.items():
        influence, description = TEN_GOD_INFLUENCE[god]
        strengths.append(TenGodStrength(
            relationship=god,
            strength=int(round_half_up(count / total * 100)) if total else 0,
            element=ten_god_element(dm.element, god),
            description=description,
            influence=influence,
        ))

    strengths.sort(key=lambda s: -s.strength)
    return tuple(strengths)


def analyze_ten_gods(chart) -> TenGodsAnalysis:
    """
    Classify every visible stem against the Day Master and score the chart.

    Returns:
        TenGodsAnalysis with the per-position map, ranked strengths,
        dominant/weak elements and the balance score
    """
    dm = chart.day.stem
    relationships = {
        f"{pillar.position}_stem": classify(dm, pillar.stem)
        for pillar in chart.pillars
    }

    analysis = TenGodsAnalysis(
        day_master_stem=dm.chinese,
        relationships=relationships,
        strengths=ten_god_strengths(chart),
        dominant_elements=dominant_elements(chart.elements),
        weak_elements=weak_elements(chart.elements),
        balance_score=balance_score(chart.elements),
    )
    logger.debug("Ten Gods for %s: %s", dm.chinese, {k: v.value for k, v in relationships.items()})
    return analysis
