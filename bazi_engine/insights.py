"""
Insights assembly.

Runs the Day Master, Ten Gods, Luck Cycle and personality steps over a
chart and condenses the result for storage.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from bazi_engine.config import LuckCycleConfig
from bazi_engine.day_master import DayMaster, resolve_day_master
from bazi_engine.luck import LuckCycle, generate_luck_cycles
from bazi_engine.personality import PersonalityTag, generate_personality_tags
from bazi_engine.symbols import Element
from bazi_engine.ten_gods import TenGodsAnalysis, analyze_ten_gods

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightsSummary:
    overall_balance: int
    dominant_elements: tuple[Element, ...]
    key_strengths: tuple[str, ...]
    areas_for_growth: tuple[str, ...]
    favorable_elements: tuple[Element, ...]
    unfavorable_elements: tuple[Element, ...]

    def to_dict(self):
        return {
            "overall_balance": self.overall_balance,
            "dominant_elements": [e.value for e in self.dominant_elements],
            "key_strengths": list(self.key_strengths),
            "areas_for_growth": list(self.areas_for_growth),
            "favorable_elements": [e.value for e in self.favorable_elements],
            "unfavorable_elements": [e.value for e in self.unfavorable_elements],
        }


@dataclass(frozen=True)
class BaziInsights:
    day_master: DayMaster
    ten_gods: TenGodsAnalysis
    luck_cycles: tuple[LuckCycle, ...]
    personality_tags: tuple[PersonalityTag, ...]
    summary: InsightsSummary

    def to_dict(self):
        return {
            "day_master": self.day_master.to_dict(),
            "ten_gods": self.ten_gods.to_dict(),
            "luck_cycles": [c.to_dict() for c in self.luck_cycles],
            "personality_tags": [t.to_dict() for t in self.personality_tags],
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class CondensedInsights:
    """Storage form: identifiers and numbers only, descriptive text dropped."""
    day_master: str
    relationships: Mapping[str, str] = field(hash=False)  # position -> TenGod value
    strengths: tuple[tuple[str, int, str], ...]  # (relationship, strength, element)
    luck_cycles: tuple[tuple[int, int, str, str, str], ...]  # (age_start, age_end, stem, branch, relationship)

    def __post_init__(self):
        object.__setattr__(self, "relationships", MappingProxyType(dict(self.relationships)))

    def to_dict(self):
        return {
            "day_master": self.day_master,
            "ten_gods": {
                "relationships": dict(self.relationships),
                "strengths": [
                    {"relationship": god, "strength": strength, "element": element}
                    for god, strength, element in self.strengths
                ],
            },
            "luck_cycles": [
                {"age_start": a, "age_end": b, "stem": stem, "branch": branch, "relationship": god}
                for a, b, stem, branch, god in self.luck_cycles
            ],
        }


def _first_tags(tags, category: str, limit: int = 3) -> tuple[str, ...]:
    return tuple(t.tag for t in tags if t.category == category)[:limit]


def compute_insights(chart, birth_year: int,
                     luck_config: Optional[LuckCycleConfig] = None) -> BaziInsights:
    """
    Derive the full insight set from a chart.

    Args:
        chart: FourPillarChart
        birth_year: Gregorian birth year for the luck-cycle calendar spans
        luck_config: luck-cycle direction and start age (defaults apply)
    """
    day_master = resolve_day_master(chart)
    ten_gods = analyze_ten_gods(chart)
    luck_cycles = generate_luck_cycles(chart, birth_year, luck_config)
    tags = generate_personality_tags(day_master, ten_gods)

    summary = InsightsSummary(
        overall_balance=ten_gods.balance_score,
        dominant_elements=ten_gods.dominant_elements,
        key_strengths=_first_tags(tags, "strengths"),
        areas_for_growth=_first_tags(tags, "weaknesses"),
        favorable_elements=ten_gods.dominant_elements,
        unfavorable_elements=ten_gods.weak_elements,
    )
    logger.debug("Insights for day master %s: balance %d, %d tags",
                 day_master.stem, ten_gods.balance_score, len(tags))
    return BaziInsights(
        day_master=day_master,
        ten_gods=ten_gods,
        luck_cycles=luck_cycles,
        personality_tags=tags,
        summary=summary,
    )


def to_persistence_form(insights: BaziInsights) -> CondensedInsights:
    return CondensedInsights(
        day_master=insights.day_master.stem,
        relationships={pos: god.value for pos, god in insights.ten_gods.relationships.items()},
        strengths=tuple(
            (s.relationship.value, s.strength, s.element.value)
            for s in insights.ten_gods.strengths
        ),
        luck_cycles=tuple(
            (c.age_start, c.age_end, c.stem, c.branch, c.relationship.value)
            for c in insights.luck_cycles
        ),
    )
