"""Day Master persona: the day pillar's stem as the reference point of the chart."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from bazi_engine.symbols import Element, HeavenlyStem, Polarity, stem_of

if TYPE_CHECKING:
    from bazi_engine.chart import FourPillarChart

# Persona keywords and imagery per Day Master stem
DAY_MASTER_PROFILES = {
    "甲": (
        ("leadership", "pioneering", "upright", "proactive", "goal-driven"),
        "Like a towering tree growing upward: a natural leader with a pioneering spirit.",
    ),
    "乙": (
        ("flexible", "adaptable", "artistic", "sensitive", "cooperative"),
        "Like flowers and vines: supple and adaptable, with an artistic, cooperative nature.",
    ),
    "丙": (
        ("passionate", "generous", "expressive", "optimistic", "influential"),
        "Like the sun's fire: warm and radiant, with a strong urge to shine and inspire.",
    ),
    "丁": (
        ("meticulous", "warm", "thoughtful", "mysterious", "reserved"),
        "Like candlelight: gentle and attentive, with depth of thought and a touch of mystery.",
    ),
    "戊": (
        ("steady", "trustworthy", "tolerant", "traditional", "responsible"),
        "Like a great mountain of earth: stable and accommodating, reliable and dutiful.",
    ),
    "己": (
        ("mild", "nurturing", "practical", "patient", "harmonizing"),
        "Like fertile garden soil: mild and nurturing, practical and good at bringing people together.",
    ),
    "庚": (
        ("decisive", "resolute", "just", "transformative", "executive"),
        "Like a forged blade: firm and decisive, with a strong sense of justice and follow-through.",
    ),
    "辛": (
        ("refined", "aesthetic", "innovative", "sensitive", "perfectionist"),
        "Like a polished jewel: refined and elegant, with a keen eye and an inventive mind.",
    ),
    "壬": (
        ("wise", "fluid", "tolerant", "adaptable", "perceptive"),
        "Like a great river: wise and flowing, highly adaptable and perceptive.",
    ),
    "癸": (
        ("gentle", "intuitive", "compassionate", "introspective", "healing"),
        "Like rain and dew: gentle and nourishing, deeply intuitive with a healing presence.",
    ),
}


@dataclass(frozen=True)
class DayMaster:
    stem: str
    element: Element
    polarity: Polarity
    keywords: tuple[str, ...]
    description: str

    def to_dict(self):
        return {
            "stem": self.stem,
            "element": self.element.value,
            "polarity": self.polarity.value,
            "keywords": list(self.keywords),
            "description": self.description,
        }


def resolve_day_master(source: Union[str, HeavenlyStem, "FourPillarChart"]) -> DayMaster:
    """
    Resolve the Day Master persona.

    Args:
        source: a chart, a HeavenlyStem, or a stem symbol (chinese or pinyin)

    Raises:
        InvalidInput: if the stem is outside the ten-stem alphabet
    """
    day = getattr(source, "day", None)
    stem = stem_of(day.stem if day is not None else source)
    keywords, description = DAY_MASTER_PROFILES[stem.chinese]
    return DayMaster(
        stem=stem.chinese,
        element=stem.element,
        polarity=stem.polarity,
        keywords=keywords,
        description=description,
    )
