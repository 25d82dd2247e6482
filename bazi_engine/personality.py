"""Rule-based personality tags synthesized from the Day Master and Ten Gods."""

from dataclasses import dataclass

from bazi_engine.day_master import DayMaster
from bazi_engine.symbols import Element
from bazi_engine.ten_gods import TenGodsAnalysis

DAY_MASTER_CONFIDENCE = 85
ELEMENT_CONFIDENCE = 70

ELEMENT_TRAITS = {
    Element.WOOD: "full of vitality",
    Element.FIRE: "enthusiastic",
    Element.EARTH: "grounded",
    Element.METAL: "resolute",
    Element.WATER: "resourceful",
}


@dataclass(frozen=True)
class PersonalityTag:
    tag: str
    category: str  # strengths, weaknesses, traits
    confidence: int  # 0-100
    source: str  # day_master, ten_gods, balance, elements

    def to_dict(self):
        return {
            "tag": self.tag,
            "category": self.category,
            "confidence": self.confidence,
            "source": self.source,
        }


def generate_personality_tags(day_master: DayMaster,
                              ten_gods: TenGodsAnalysis) -> tuple[PersonalityTag, ...]:
    tags = [
        PersonalityTag(keyword, "traits", DAY_MASTER_CONFIDENCE, "day_master")
        for keyword in day_master.keywords
    ]

    # Top three Ten Gods, two influence keywords each
    for entry in ten_gods.strengths[:3]:
        category = "strengths" if entry.strength > 30 else "traits"
        confidence = min(95, 60 + entry.strength)
        for keyword in entry.influence[:2]:
            tags.append(PersonalityTag(keyword, category, confidence, "ten_gods"))

    score = ten_gods.balance_score
    if score > 70:
        tags.append(PersonalityTag("well-balanced", "strengths", score, "balance"))
    elif score < 30:
        tags.append(PersonalityTag("needs-adjustment", "weaknesses", 100 - score, "balance"))

    for element in ten_gods.dominant_elements:
        tags.append(PersonalityTag(ELEMENT_TRAITS[element], "traits", ELEMENT_CONFIDENCE, "elements"))

    return tuple(tags)
