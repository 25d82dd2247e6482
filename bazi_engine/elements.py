"""
Five-element distribution across the four pillars.

Tallies visible stems, branch primary elements and hidden stems with the
configured weights, then ranks the elements and scores how evenly they
are spread.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from bazi_engine.config import DEFAULT_WEIGHTS, ElementWeights
from bazi_engine.symbols import STEM_BY_CHINESE, Element


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, independent of float banker's rounding."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class ElementScores:
    wood: float = 0.0
    fire: float = 0.0
    earth: float = 0.0
    metal: float = 0.0
    water: float = 0.0

    def get(self, element: Element) -> float:
        return getattr(self, element.value)

    def items(self) -> tuple[tuple[Element, float], ...]:
        """(element, score) pairs in the fixed element order."""
        return tuple((e, self.get(e)) for e in Element)

    @property
    def total(self) -> float:
        return sum(score for _, score in self.items())

    def to_dict(self) -> dict:
        return {e.value: score for e, score in self.items()}


# ============================================================
# ELEMENT DISTRIBUTION
# ============================================================

def element_distribution(pillars: Iterable, weights: Optional[ElementWeights] = None) -> ElementScores:
    """
    Count element presence across all pillars.

    Per pillar:
    - Visible stem: stem_weight to the stem's element
    - Branch: branch_weight to the branch's primary element
    - Hidden stems: hidden_stem_weight split evenly across the branch's
      hidden stems, each credited to its own element

    Each total is rounded to one decimal place.
    """
    weights = weights or DEFAULT_WEIGHTS
    distribution = {e: 0.0 for e in Element}

    for pillar in pillars:
        distribution[pillar.stem.element] += weights.stem_weight
        distribution[pillar.branch.element] += weights.branch_weight

        hidden = pillar.branch.hidden_stems
        share = weights.hidden_stem_weight / len(hidden)
        for symbol in hidden:
            distribution[STEM_BY_CHINESE[symbol].element] += share

    return ElementScores(**{e.value: round_half_up(v, 1) for e, v in distribution.items()})


# ============================================================
# RANKING AND BALANCE
# ============================================================

def rank_elements(scores: ElementScores) -> list[Element]:
    """Elements from strongest to weakest; ties keep the fixed element order."""
    return [e for e, _ in sorted(scores.items(), key=lambda item: -item[1])]


def dominant_elements(scores: ElementScores) -> tuple[Element, Element]:
    ranked = rank_elements(scores)
    return ranked[0], ranked[1]


def weak_elements(scores: ElementScores) -> tuple[Element, Element]:
    ranked = rank_elements(scores)
    return ranked[-2], ranked[-1]


def balance_score(scores: ElementScores) -> int:
    """
    0-100 score of how evenly the five elements are spread.

    100 minus ten times the population variance of the five scores,
    clamped to [0, 100].
    """
    values = [score for _, score in scores.items()]
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    raw = max(0.0, min(100.0, 100 - variance * 10))
    return int(round_half_up(raw))
