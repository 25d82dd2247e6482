"""
Engine configuration.

Weights for the element tally and the luck-cycle progression settings.
Both are plain frozen values handed in by the caller; nothing here reads
the environment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from bazi_engine.errors import InvalidInput


def _pick(data: Mapping[str, Any], snake: str, camel: str, default):
    if snake in data:
        return data[snake]
    return data.get(camel, default)


@dataclass(frozen=True)
class ElementWeights:
    """
    Weights applied when tallying elements across the four pillars.

    - stem_weight: each visible stem
    - branch_weight: each branch's primary element
    - hidden_stem_weight: shared evenly among a branch's hidden stems
    """
    stem_weight: float = 1.0
    branch_weight: float = 1.0
    hidden_stem_weight: float = 0.3

    def __post_init__(self):
        for name in ("stem_weight", "branch_weight", "hidden_stem_weight"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInput(f"{name} must be a number, got {value!r}")
            if value < 0:
                raise InvalidInput(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ElementWeights":
        """Build weights from a dict using snake_case or camelCase keys."""
        if not data:
            return DEFAULT_WEIGHTS
        return cls(
            stem_weight=_pick(data, "stem_weight", "stemWeight", 1.0),
            branch_weight=_pick(data, "branch_weight", "branchWeight", 1.0),
            hidden_stem_weight=_pick(data, "hidden_stem_weight", "hiddenStemWeight", 0.3),
        )

    def to_dict(self) -> dict:
        return {
            "stem_weight": self.stem_weight,
            "branch_weight": self.branch_weight,
            "hidden_stem_weight": self.hidden_stem_weight,
        }


class LuckDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def step(self) -> int:
        return 1 if self is LuckDirection.FORWARD else -1


# Luck cycles start at age 8 unless the caller derives a start age from
# the solar terms (see luck.derive_luck_config).
DEFAULT_START_AGE = 8
LUCK_CYCLE_COUNT = 8


@dataclass(frozen=True)
class LuckCycleConfig:
    """
    Progression settings for the decade luck cycles.

    Args:
        direction: walk forward or backward through the sexagenary cycle.
            The traditional rule depends on the year stem's polarity and
            the subject's sex; callers that know the sex should use
            luck.derive_luck_config.
        start_age: age at which the first cycle begins.
    """
    direction: LuckDirection = LuckDirection.FORWARD
    start_age: int = DEFAULT_START_AGE

    def __post_init__(self):
        if not isinstance(self.direction, LuckDirection):
            raise InvalidInput(f"direction must be a LuckDirection, got {self.direction!r}")
        if isinstance(self.start_age, bool) or not isinstance(self.start_age, int) or self.start_age < 0:
            raise InvalidInput(f"start_age must be a non-negative integer, got {self.start_age!r}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "LuckCycleConfig":
        """Build a config from a dict using snake_case or camelCase keys."""
        if not data:
            return DEFAULT_LUCK_CONFIG
        direction = data.get("direction", LuckDirection.FORWARD)
        if isinstance(direction, str):
            try:
                direction = LuckDirection(direction.lower())
            except ValueError as exc:
                raise InvalidInput(f"Unknown luck direction: {direction!r}") from exc
        return cls(
            direction=direction,
            start_age=_pick(data, "start_age", "startAge", DEFAULT_START_AGE),
        )

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "start_age": self.start_age,
        }


DEFAULT_WEIGHTS = ElementWeights()
DEFAULT_LUCK_CONFIG = LuckCycleConfig()
