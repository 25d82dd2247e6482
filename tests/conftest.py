import pytest

from bazi_engine import compute_chart, compute_insights


@pytest.fixture(scope="session")
def earth_chart():
    # 庚午 己卯 己卯 己巳
    return compute_chart("1990-03-15T10:00:00", "Asia/Shanghai")


@pytest.fixture(scope="session")
def metal_chart():
    # Day pillar 辛卯
    return compute_chart("1985-08-20T15:00:00", "Asia/Shanghai")


@pytest.fixture(scope="session")
def earth_insights(earth_chart):
    return compute_insights(earth_chart, 1990)
