"""
Four Pillars chart computation.

Converts a local birth date-time in an IANA timezone into the year, month,
day and hour pillars, then tallies the five-element distribution.

- Year: sexagenary year starting at Li Chun (Sun at 315°)
- Month: branch from the Sun's longitude (Jie boundaries), stem by the
  Five Tigers rule
- Day: sexagenary day from the Julian Day Number of the local date
- Hour: two-hour windows, 23:00-00:59 = 子, stem by the Five Rats rule

Every value is derived from the explicit inputs; nothing reads the clock.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from typing import Mapping, Optional, Union

from bazi_engine.astro_calendar import (
    LunarDate,
    day_sexagenary_index,
    julian_day,
    li_chun,
    lunar_date,
    month_branch_index,
    parse_birth_local,
    sun_longitude,
)
from bazi_engine.config import DEFAULT_WEIGHTS, ElementWeights
from bazi_engine.elements import ElementScores, element_distribution
from bazi_engine.errors import InvalidInput
from bazi_engine.symbols import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    EarthlyBranch,
    HeavenlyStem,
    branch_of,
    stem_of,
)

logger = logging.getLogger(__name__)

POSITIONS = ("year", "month", "day", "hour")


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"

    @property
    def combined(self) -> str:
        return self.stem.chinese + self.branch.chinese

    def __str__(self):
        return f"{self.combined} {self.stem.pinyin} {self.branch.pinyin} ({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})"

    @classmethod
    def from_label(cls, label: str, position: str) -> "Pillar":
        """
        Build a pillar from a two-symbol sexagenary label such as "己卯".

        Raises:
            InvalidInput: if the label is not a stem followed by a branch
        """
        if not isinstance(label, str) or len(label) != 2:
            raise InvalidInput(f"Pillar label must be two symbols, got {label!r}")
        return cls(stem=stem_of(label[0]), branch=branch_of(label[1]), position=position)

    def to_dict(self):
        return {
            "position": self.position,
            "stem": self.stem.chinese,
            "branch": self.branch.chinese,
            "combined": self.combined,
            "stem_detail": {
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch_detail": {
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "hidden_stems": list(self.branch.hidden_stems),
            },
        }


@dataclass(frozen=True)
class ChartMeta:
    lunar: LunarDate
    utc: datetime
    timezone: str
    local: datetime

    def to_dict(self):
        return {
            "lunar": self.lunar.to_dict(),
            "utc": self.utc.isoformat(),
            "timezone": self.timezone,
            "local": self.local.isoformat(),
        }


@dataclass(frozen=True)
class FourPillarChart:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar
    elements: ElementScores
    weights: ElementWeights = DEFAULT_WEIGHTS
    meta: Optional[ChartMeta] = None  # absent for charts rebuilt from stored labels

    @property
    def pillars(self) -> tuple[Pillar, Pillar, Pillar, Pillar]:
        return (self.year, self.month, self.day, self.hour)

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    @property
    def labels(self) -> dict:
        return {p.position: p.combined for p in self.pillars}

    def to_dict(self):
        return {
            "bazi": self.labels,
            "pillars": {p.position: p.to_dict() for p in self.pillars},
            "elements": self.elements.to_dict(),
            "weights": self.weights.to_dict(),
            "meta": self.meta.to_dict() if self.meta else None,
        }


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def year_pillar(effective_year: int) -> Pillar:
    """
    Compute the Year Pillar for a sexagenary year.

    Year 4 CE was Jia Zi, the start of the cycle.
    """
    return Pillar(
        stem=HEAVENLY_STEMS[(effective_year - 4) % 10],
        branch=EARTHLY_BRANCHES[(effective_year - 4) % 12],
        position="year",
    )


def month_pillar(year_stem_index: int, month_branch_idx: int) -> Pillar:
    """
    Compute the Month Pillar using the Five Tigers Escape (Wu Hu Dun) formula.

    Five Tigers Escape rule:
    - Year stem Jia/Ji → month 1 stem starts at Bing
    - Year stem Yi/Geng → month 1 stem starts at Wu
    - Year stem Bing/Xin → month 1 stem starts at Geng
    - Year stem Ding/Ren → month 1 stem starts at Ren
    - Year stem Wu/Gui → month 1 stem starts at Jia

    Args:
        year_stem_index: index of the year's heavenly stem (0-9)
        month_branch_idx: index of the month's earthly branch (0-11)
            Note: month 1 (Tiger/Yin) has branch index 2
    """
    tiger_start_stems = {
        0: 2, 5: 2,   # Jia/Ji year → Bing Tiger
        1: 4, 6: 4,   # Yi/Geng year → Wu Tiger
        2: 6, 7: 6,   # Bing/Xin year → Geng Tiger
        3: 8, 8: 8,   # Ding/Ren year → Ren Tiger
        4: 0, 9: 0,   # Wu/Gui year → Jia Tiger
    }
    months_from_tiger = (month_branch_idx - 2) % 12
    stem_index = (tiger_start_stems[year_stem_index] + months_from_tiger) % 10

    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[month_branch_idx],
        position="month",
    )


def day_pillar(day: date) -> Pillar:
    """Compute the Day Pillar from the sexagenary index of the calendar date."""
    sexagenary = day_sexagenary_index(day)
    return Pillar(
        stem=HEAVENLY_STEMS[sexagenary % 10],
        branch=EARTHLY_BRANCHES[sexagenary % 12],
        position="day",
    )


def hour_branch_index(hour: int) -> int:
    """
    Chinese hours (shi chen) are 2-hour blocks:
    23:00-00:59 = Zi (Rat) = 0, 01:00-02:59 = Chou (Ox) = 1, ...
    21:00-22:59 = Hai (Pig) = 11
    """
    return ((hour + 1) % 24) // 2


def hour_pillar(day_stem_index: int, hour: int) -> Pillar:
    """
    Compute the Hour Pillar (Five Rats Escape).

    The Zi-hour stem restarts relative to the day stem:
    stem = (day_stem_index * 2 + hour_branch_index) mod 10.
    """
    branch_index = hour_branch_index(hour)
    return Pillar(
        stem=HEAVENLY_STEMS[(day_stem_index * 2 + branch_index) % 10],
        branch=EARTHLY_BRANCHES[branch_index],
        position="hour",
    )


# ============================================================
# FULL CHART COMPUTATION
# ============================================================

def _coerce_weights(weights: Union[ElementWeights, Mapping, None]) -> ElementWeights:
    if weights is None:
        return DEFAULT_WEIGHTS
    if isinstance(weights, ElementWeights):
        return weights
    if isinstance(weights, Mapping):
        return ElementWeights.from_mapping(weights)
    raise InvalidInput(f"Unsupported weight config: {weights!r}")


def compute_chart(birth_local: str, timezone: str,
                  weights: Union[ElementWeights, Mapping, None] = None) -> FourPillarChart:
    """
    Compute a Four Pillars chart from a local birth date-time.

    Args:
        birth_local: ISO-8601 local date-time, e.g. "1990-03-15T10:00:00"
        timezone: IANA zone of the birth place, e.g. "Asia/Shanghai"
        weights: ElementWeights or a dict with stem/branch/hidden weights

    Returns:
        FourPillarChart with pillars, element scores and metadata

    Raises:
        InvalidInput: malformed date-time, unknown zone or bad weights
    """
    element_weights = _coerce_weights(weights)
    local = parse_birth_local(birth_local, timezone)
    jd = julian_day(local)

    effective_year = local.year if jd >= li_chun(local.year) else local.year - 1
    yp = year_pillar(effective_year)
    mp = month_pillar(yp.stem.index, month_branch_index(sun_longitude(jd)))
    dp = day_pillar(local.date())
    hp = hour_pillar(dp.stem.index, local.hour)

    pillars = (yp, mp, dp, hp)
    chart = FourPillarChart(
        year=yp,
        month=mp,
        day=dp,
        hour=hp,
        elements=element_distribution(pillars, element_weights),
        weights=element_weights,
        meta=ChartMeta(
            lunar=lunar_date(local),
            utc=local.astimezone(dt_timezone.utc),
            timezone=timezone,
            local=local,
        ),
    )
    logger.debug("Computed chart %s for %s %s", chart.labels, birth_local, timezone)
    return chart


def chart_from_labels(labels: Mapping[str, str],
                      weights: Union[ElementWeights, Mapping, None] = None) -> FourPillarChart:
    """
    Rebuild a chart from stored sexagenary labels, e.g.
    {"year": "庚午", "month": "己卯", "day": "己卯", "hour": "己巳"}.

    The rebuilt chart carries no birth metadata.
    """
    missing = [pos for pos in POSITIONS if pos not in labels]
    if missing:
        raise InvalidInput(f"Missing pillar labels: {', '.join(missing)}")
    element_weights = _coerce_weights(weights)
    yp, mp, dp, hp = (Pillar.from_label(labels[pos], pos) for pos in POSITIONS)
    return FourPillarChart(
        year=yp,
        month=mp,
        day=dp,
        hour=hp,
        elements=element_distribution((yp, mp, dp, hp), element_weights),
        weights=element_weights,
    )
