"""
Luck Cycles (大运 Da Yun).

Decade-long periods that step through the sexagenary cycle from the
month pillar, one position per cycle, forward or backward.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from bazi_engine.astro_calendar import solar_term_start_age
from bazi_engine.config import (
    DEFAULT_LUCK_CONFIG,
    LUCK_CYCLE_COUNT,
    LuckCycleConfig,
    LuckDirection,
)
from bazi_engine.errors import InvalidInput
from bazi_engine.symbols import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    Element,
    HeavenlyStem,
    Polarity,
    stem_of,
)
from bazi_engine.ten_gods import TenGod, classify

logger = logging.getLogger(__name__)


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class LuckCycle:
    age_start: int
    age_end: int
    gregorian_start: int
    gregorian_end: int
    stem: str
    branch: str
    element: Element
    relationship: TenGod
    influence: str
    description: str

    @property
    def combined(self) -> str:
        return self.stem + self.branch

    def to_dict(self):
        return {
            "age_start": self.age_start,
            "age_end": self.age_end,
            "gregorian_start": self.gregorian_start,
            "gregorian_end": self.gregorian_end,
            "stem": self.stem,
            "branch": self.branch,
            "combined": self.combined,
            "element": self.element.value,
            "relationship": self.relationship.value,
            "influence": self.influence,
            "description": self.description,
        }


def luck_direction(year_stem: Union[str, HeavenlyStem], sex: Sex) -> LuckDirection:
    """
    Traditional direction of progression:
    - Yang stem year + Male OR Yin stem year + Female → FORWARD
    - Yang stem year + Female OR Yin stem year + Male → BACKWARD
    """
    yang_year = stem_of(year_stem).polarity is Polarity.YANG
    if not isinstance(sex, Sex):
        raise InvalidInput(f"sex must be a Sex, got {sex!r}")
    forward = yang_year == (sex is Sex.MALE)
    return LuckDirection.FORWARD if forward else LuckDirection.BACKWARD


def derive_luck_config(chart, sex: Sex) -> LuckCycleConfig:
    """
    Build a LuckCycleConfig from the subject's sex and the solar terms.

    Direction follows luck_direction(); the start age counts the days from
    birth to the nearest Jie in that direction, three days to a year.
    Needs a chart computed from a birth instant (with metadata).
    """
    if chart.meta is None:
        raise InvalidInput("Chart has no birth instant; start age cannot be derived")
    direction = luck_direction(chart.year.stem, sex)
    start_age = solar_term_start_age(chart.meta.utc, direction is LuckDirection.FORWARD)
    return LuckCycleConfig(direction=direction, start_age=start_age)


def generate_luck_cycles(chart, birth_year: int,
                         config: Optional[LuckCycleConfig] = None) -> tuple[LuckCycle, ...]:
    """
    Compute the eight Luck Cycles.

    Args:
        chart: FourPillarChart
        birth_year: Gregorian birth year, used for the calendar-year spans
        config: direction and start age; defaults to forward from age 8

    Returns:
        Eight consecutive, non-overlapping ten-year cycles
    """
    if isinstance(birth_year, bool) or not isinstance(birth_year, int):
        raise InvalidInput(f"birth_year must be an integer, got {birth_year!r}")
    config = config or DEFAULT_LUCK_CONFIG
    step = config.direction.step
    day_stem = chart.day.stem

    stem_index = chart.month.stem.index
    branch_index = chart.month.branch.index
    cycles = []
    for i in range(LUCK_CYCLE_COUNT):
        stem_index = (stem_index + step) % 10
        branch_index = (branch_index + step) % 12
        stem = HEAVENLY_STEMS[stem_index]
        branch = EARTHLY_BRANCHES[branch_index]
        god = classify(day_stem, stem)

        age_start = config.start_age + i * 10
        age_end = age_start + 9
        gregorian_start = birth_year + age_start
        gregorian_end = birth_year + age_end
        combined = stem.chinese + branch.chinese

        cycles.append(LuckCycle(
            age_start=age_start,
            age_end=age_end,
            gregorian_start=gregorian_start,
            gregorian_end=gregorian_end,
            stem=stem.chinese,
            branch=branch.chinese,
            element=stem.element,
            relationship=god,
            influence=f"A {stem.element.value} cycle led by {god.label}, shaping personal growth and opportunity.",
            description=(
                f"Ages {age_start}-{age_end} ({gregorian_start}-{gregorian_end}): "
                f"{combined} ({stem.pinyin} {branch.pinyin}) luck cycle, "
                f"{stem.element.value} prevails and {god.label} takes the lead."
            ),
        ))

    logger.debug("Luck cycles (%s from %s): %s", config.direction.value,
                 chart.month.combined, [c.combined for c in cycles])
    return tuple(cycles)
