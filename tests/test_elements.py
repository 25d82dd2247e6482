"""Five-element distribution tests"""

import pytest

from bazi_engine import ElementWeights, compute_chart
from bazi_engine.chart import Pillar
from bazi_engine.elements import (
    ElementScores,
    balance_score,
    dominant_elements,
    element_distribution,
    rank_elements,
    round_half_up,
    weak_elements,
)
from bazi_engine.symbols import Element


class TestDistribution:
    def test_sample_chart(self, earth_chart):
        scores = earth_chart.elements
        assert scores.wood == 2.6
        assert scores.metal == 1.1
        assert scores.water == 0.0
        assert scores.earth > scores.wood > scores.fire > scores.metal

    def test_all_entries_non_negative(self, earth_chart, metal_chart):
        for chart in (earth_chart, metal_chart):
            assert all(score >= 0 for _, score in chart.elements.items())

    def test_single_pillar_breakdown(self):
        # 甲子: wood stem, water branch, hidden 癸 (water)
        scores = element_distribution([Pillar.from_label("甲子", "year")])
        assert scores == ElementScores(wood=1.0, water=1.3)

    def test_hidden_weight_split_evenly(self):
        # 寅 hides 甲 丙 戊
        scores = element_distribution([Pillar.from_label("庚寅", "year")],
                                      ElementWeights(hidden_stem_weight=0.6))
        assert scores == ElementScores(wood=1.2, fire=0.2, earth=0.2, metal=1.0)

    def test_hidden_weight_changes_total(self):
        default = compute_chart("1990-03-15T10:00:00", "Asia/Shanghai")
        heavier = compute_chart("1990-03-15T10:00:00", "Asia/Shanghai",
                                ElementWeights(hidden_stem_weight=0.9))
        assert heavier.elements.total > default.elements.total
        assert heavier.elements != default.elements

    @pytest.mark.parametrize("weights", [
        {"stemWeight": 2.0},
        {"branchWeight": 0.5},
        {"hiddenStemWeight": 0.0},
        {"stem_weight": 1.5, "branch_weight": 1.5},
    ])
    def test_any_weight_changes_result(self, earth_chart, weights):
        chart = compute_chart("1990-03-15T10:00:00", "Asia/Shanghai", weights)
        assert chart.elements != earth_chart.elements

    def test_zero_weights(self, earth_chart):
        scores = element_distribution(earth_chart.pillars, ElementWeights(0, 0, 0))
        assert scores.total == 0


class TestRanking:
    def test_ties_keep_element_order(self):
        scores = ElementScores(wood=1.0, fire=2.0, earth=1.0, metal=2.0, water=1.0)
        assert rank_elements(scores) == [
            Element.FIRE, Element.METAL, Element.WOOD, Element.EARTH, Element.WATER,
        ]
        assert dominant_elements(scores) == (Element.FIRE, Element.METAL)
        assert weak_elements(scores) == (Element.EARTH, Element.WATER)

    def test_sample_chart(self, earth_chart):
        assert dominant_elements(earth_chart.elements) == (Element.EARTH, Element.WOOD)
        assert weak_elements(earth_chart.elements) == (Element.METAL, Element.WATER)


class TestBalance:
    def test_perfectly_even(self):
        assert balance_score(ElementScores(2.0, 2.0, 2.0, 2.0, 2.0)) == 100

    def test_clamped_at_zero(self):
        assert balance_score(ElementScores(wood=20.0)) == 0

    def test_variance_formula(self):
        # mean 2, variance (4 + 0 + 0 + 0 + 4) / 5 = 1.6 → 100 - 16
        assert balance_score(ElementScores(4.0, 2.0, 2.0, 2.0, 0.0)) == 84

    def test_sample_chart_in_range(self, earth_chart):
        assert 0 <= balance_score(earth_chart.elements) <= 100


class TestRounding:
    @pytest.mark.parametrize("value,digits,expected", [
        (0.5, 0, 1), (1.5, 0, 2), (2.5, 0, 3), (16.666, 0, 17), (0.25, 1, 0.3), (2.64, 1, 2.6),
    ])
    def test_half_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected
