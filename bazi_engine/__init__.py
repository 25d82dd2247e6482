"""
BaZi (Four Pillars of Destiny) calculation engine.

Handles:
- Local birth time to Four Pillars conversion
- Five-element distribution
- Day Master persona
- Ten Gods classification and strength ranking
- Luck Cycle sequence
- Personality tags and a condensed storage form

This package COMPUTES. It does no I/O, storage or text generation.
"""

import logging

from bazi_engine.chart import FourPillarChart, Pillar, chart_from_labels, compute_chart
from bazi_engine.config import ElementWeights, LuckCycleConfig, LuckDirection
from bazi_engine.errors import BaziError, InternalConsistency, InvalidInput
from bazi_engine.insights import (
    BaziInsights,
    CondensedInsights,
    compute_insights,
    to_persistence_form,
)
from bazi_engine.luck import Sex, derive_luck_config
from bazi_engine.ten_gods import TenGod

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BaziError",
    "BaziInsights",
    "CondensedInsights",
    "ElementWeights",
    "FourPillarChart",
    "InternalConsistency",
    "InvalidInput",
    "LuckCycleConfig",
    "LuckDirection",
    "Pillar",
    "Sex",
    "TenGod",
    "chart_from_labels",
    "compute_chart",
    "compute_insights",
    "derive_luck_config",
    "to_persistence_form",
]
