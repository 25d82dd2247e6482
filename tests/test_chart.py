"""Four Pillars conversion tests"""

from datetime import timezone

import pytest

from bazi_engine import InvalidInput, compute_chart
from bazi_engine.astro_calendar import (
    MAX_SUPPORTED_YEAR,
    MIN_SUPPORTED_YEAR,
    check_supported_year,
    find_jie_dates,
    li_chun,
    month_branch_index,
)
from bazi_engine.chart import Pillar, chart_from_labels, hour_branch_index, hour_pillar
from bazi_engine.symbols import STEM_BY_CHINESE

DAY_CASES = [
    {"birth": "1987-01-07T09:55:00", "expected_day": "丙辰"},
    {"birth": "1984-03-08T09:15:00", "expected_day": "辛丑"},
    {"birth": "2008-09-08T16:03:00", "expected_day": "辛亥"},
    {"birth": "1990-03-15T10:00:00", "expected_day": "己卯"},
    {"birth": "1985-08-20T15:00:00", "expected_day": "辛卯"},
]


class TestPillars:
    def test_standard_noon(self):
        chart = compute_chart("1990-05-15T12:00:00", "Asia/Shanghai")
        assert chart.labels == {"year": "庚午", "month": "辛巳", "day": "庚辰", "hour": "壬午"}
        assert chart.year.stem.chinese == "庚"
        assert chart.year.branch.chinese == "午"
        assert chart.day.stem.chinese == "庚"
        assert chart.day.branch.chinese == "辰"

    def test_sample_chart(self, earth_chart):
        assert earth_chart.labels == {"year": "庚午", "month": "己卯", "day": "己卯", "hour": "己巳"}
        assert [p.position for p in earth_chart.pillars] == ["year", "month", "day", "hour"]

    @pytest.mark.parametrize("case", DAY_CASES, ids=[c["birth"][:10] for c in DAY_CASES])
    def test_day_pillar(self, case):
        chart = compute_chart(case["birth"], "Asia/Shanghai")
        assert chart.day.combined == case["expected_day"]

    def test_before_li_chun_uses_previous_year(self):
        chart = compute_chart("2025-02-02T12:00:00", "Asia/Shanghai")
        assert chart.year.combined == "甲辰"
        assert chart.month.branch.chinese == "丑"

    def test_after_li_chun_uses_new_year(self):
        chart = compute_chart("2025-02-05T12:00:00", "Asia/Shanghai")
        assert chart.year.combined == "乙巳"
        assert chart.month.combined == "戊寅"

    def test_new_year_eve_belongs_to_previous_sexagenary_year(self):
        chart = compute_chart("2000-01-01T00:30:00", "America/New_York")
        assert chart.year.combined == "己卯"
        assert chart.month.combined == "丙子"
        assert chart.day.combined == "戊午"


class TestHourPillar:
    def test_midnight_new_york(self):
        chart = compute_chart("2000-01-01T00:30:00", "America/New_York")
        assert chart.hour.branch.chinese == "子"
        assert chart.hour.combined == "壬子"

    def test_late_evening_is_zi_hour(self):
        chart = compute_chart("2020-12-31T23:30:00", "Asia/Tokyo")
        assert chart.hour.branch.chinese == "子"
        assert chart.meta.lunar is not None

    def test_early_morning_is_tiger_hour(self):
        chart = compute_chart("1985-03-20T04:00:00", "Europe/London")
        assert chart.hour.branch.chinese == "寅"
        assert chart.elements.wood > 0

    @pytest.mark.parametrize("birth", [
        "1990-03-15T23:00:00",
        "1990-03-15T23:59:00",
        "2004-07-01T00:00:00",
        "2012-11-30T00:59:59",
        "1975-02-28T23:15:00",
    ])
    def test_zi_window_spans_midnight(self, birth):
        chart = compute_chart(birth, "Asia/Shanghai")
        assert chart.hour.branch.chinese == "子"

    def test_branch_windows(self):
        assert [hour_branch_index(h) for h in range(24)] == [
            0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10, 11, 11, 0,
        ]

    def test_hour_stem_restarts_from_day_stem(self):
        # Jia/Ji days start the Zi hour at Jia, Wu/Gui days at Ren
        assert hour_pillar(STEM_BY_CHINESE["甲"].index, 0).combined == "甲子"
        assert hour_pillar(STEM_BY_CHINESE["己"].index, 23).combined == "甲子"
        assert hour_pillar(STEM_BY_CHINESE["戊"].index, 0).combined == "壬子"
        assert hour_pillar(STEM_BY_CHINESE["己"].index, 10).combined == "己巳"


class TestTimezones:
    def test_same_instant_same_day_different_hour(self):
        utc_chart = compute_chart("2010-06-15T14:00:00", "UTC")
        ny_chart = compute_chart("2010-06-15T10:00:00", "America/New_York")
        assert utc_chart.day.combined == ny_chart.day.combined
        assert utc_chart.meta.utc == ny_chart.meta.utc
        assert utc_chart.hour.combined != ny_chart.hour.combined

    def test_offset_in_string_is_converted_to_zone(self):
        chart = compute_chart("1990-03-15T02:00:00+00:00", "Asia/Shanghai")
        assert chart.meta.local.hour == 10
        assert chart.hour.combined == "己巳"

    @pytest.mark.parametrize("birth", ["1990-03-15T02:00:00Z", "1990-03-15T02:00:00z"])
    def test_trailing_z_means_utc(self, earth_chart, birth):
        chart = compute_chart(birth, "Asia/Shanghai")
        assert chart.labels == earth_chart.labels
        assert chart.meta.utc == earth_chart.meta.utc

    def test_meta(self, earth_chart):
        assert earth_chart.meta.timezone == "Asia/Shanghai"
        assert earth_chart.meta.utc.tzinfo == timezone.utc
        assert earth_chart.meta.utc.isoformat().startswith("1990-03-15T02:00:00")


class TestLunarDate:
    def test_sample_lunar_date(self, earth_chart):
        lunar = earth_chart.meta.lunar
        assert (lunar.year, lunar.month, lunar.day) == (1990, 2, 19)
        assert lunar.is_leap_month is False
        assert lunar.label

    def test_leap_month(self):
        lunar = compute_chart("2020-06-01T12:00:00", "Asia/Shanghai").meta.lunar
        assert lunar.month == 4
        assert lunar.is_leap_month is True


class TestInvalidInput:
    @pytest.mark.parametrize("birth", ["not-a-date", "2021-02-30T10:00:00", "", "15/03/1990 10:00"])
    def test_bad_datetime(self, birth):
        with pytest.raises(InvalidInput):
            compute_chart(birth, "Asia/Shanghai")

    def test_non_string_datetime(self):
        with pytest.raises(InvalidInput):
            compute_chart(19900315, "Asia/Shanghai")

    @pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "", "   "])
    def test_bad_timezone(self, zone):
        with pytest.raises(InvalidInput):
            compute_chart("1990-03-15T10:00:00", zone)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            compute_chart("garbage", "UTC")

    def test_negative_weight(self):
        with pytest.raises(InvalidInput):
            compute_chart("1990-03-15T10:00:00", "UTC", {"stemWeight": -1})


class TestSupportedRange:
    @pytest.mark.parametrize("birth", ["3500-06-01T12:00:00", "9999-06-01T12:00:00", "3000-01-01T00:00:00"])
    def test_beyond_ephemeris_is_invalid_input(self, birth):
        with pytest.raises(InvalidInput):
            compute_chart(birth, "UTC")

    def test_last_supported_year(self):
        chart = compute_chart("2999-06-01T12:00:00", "UTC")
        assert chart.meta.local.year == MAX_SUPPORTED_YEAR
        assert len(chart.labels) == 4

    def test_utc_instant_past_last_year(self):
        # 2999-12-31 23:00 in New York is already 3000 in UTC
        with pytest.raises(InvalidInput):
            compute_chart("2999-12-31T23:00:00", "America/New_York")

    def test_first_day_before_utc_epoch(self):
        # Converting to UTC would fall before 0001-01-01
        with pytest.raises(InvalidInput):
            compute_chart("0001-01-01T00:00:00", "Asia/Shanghai")

    @pytest.mark.parametrize("year,supported", [
        (MIN_SUPPORTED_YEAR, True), (MAX_SUPPORTED_YEAR, True), (0, False), (MAX_SUPPORTED_YEAR + 1, False),
    ])
    def test_year_bounds(self, year, supported):
        if supported:
            check_supported_year(year)
        else:
            with pytest.raises(InvalidInput):
                check_supported_year(year)


class TestDeterminism:
    def test_repeated_calls_are_equal(self):
        first = compute_chart("1990-03-15T10:00:00", "Asia/Shanghai")
        for _ in range(3):
            assert compute_chart("1990-03-15T10:00:00", "Asia/Shanghai") == first

    def test_to_dict(self, earth_chart):
        data = earth_chart.to_dict()
        assert data["bazi"]["day"] == "己卯"
        assert data["pillars"]["hour"]["combined"] == "己巳"
        assert set(data["elements"]) == {"wood", "fire", "earth", "metal", "water"}
        assert data["meta"]["timezone"] == "Asia/Shanghai"


class TestLabels:
    def test_from_label(self):
        pillar = Pillar.from_label("己卯", "day")
        assert pillar.stem.pinyin == "Ji"
        assert pillar.branch.animal == "Rabbit"

    @pytest.mark.parametrize("label", ["X子", "甲X", "甲", "甲子丑", None])
    def test_from_bad_label(self, label):
        with pytest.raises(InvalidInput):
            Pillar.from_label(label, "year")

    def test_chart_from_labels_matches_computed(self, earth_chart):
        rebuilt = chart_from_labels(earth_chart.labels)
        assert rebuilt.pillars == earth_chart.pillars
        assert rebuilt.elements == earth_chart.elements
        assert rebuilt.meta is None

    def test_chart_from_labels_missing_position(self):
        with pytest.raises(InvalidInput):
            chart_from_labels({"year": "庚午", "month": "己卯", "day": "己卯"})


class TestSolarTerms:
    def test_twelve_jie_per_year(self):
        terms = find_jie_dates(2026)
        assert len(terms) == 12
        assert [t.jd for t in terms] == sorted(t.jd for t in terms)
        # Xiao Han (early January) opens the Gregorian year
        assert terms[0].name == "Xiao Han"
        assert terms[0].branch_index == 1
        start = next(t for t in terms if t.name == "Li Chun")
        assert start.longitude == 315.0
        assert start.branch_index == 2
        assert start.jd == pytest.approx(li_chun(2026))

    def test_terms_open_their_month(self):
        for term in find_jie_dates(2026):
            assert month_branch_index(term.longitude) == term.branch_index

    @pytest.mark.parametrize("longitude,expected", [
        (315.0, 2), (344.9, 2), (345.0, 3), (0.0, 3), (15.0, 4), (255.0, 0), (284.9, 0), (285.0, 1),
    ])
    def test_month_branch_from_sun(self, longitude, expected):
        assert month_branch_index(longitude) == expected
