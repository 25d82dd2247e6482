"""
Calendar utilities for the pillar computation.
Handles birth-time parsing, Julian Day conversion, solar term lookups
and the lunar date.

Swiss Ephemeris is always called with the built-in Moshier ephemeris so
results never depend on which ephemeris files happen to be installed.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import swisseph as swe
from lunar_python import Solar

from bazi_engine.errors import InvalidInput, InternalConsistency

logger = logging.getLogger(__name__)

EPHE_FLAGS = swe.FLG_MOSEPH

# (JDN + 49) is divisible by 60 on a 甲子 day: 1949-10-01 (JDN 2433191) = 甲子
_JDN_SEXAGENARY_OFFSET = 49

# Moshier ephemeris ends at JD 2818000.5 (early 3003); solar-term searches
# look up to a year past the birth year.
MIN_SUPPORTED_YEAR = 1
MAX_SUPPORTED_YEAR = 2999


# ============================================================
# BIRTH TIME PARSING
# ============================================================

def resolve_zone(timezone: str) -> ZoneInfo:
    """Look up an IANA timezone, raising InvalidInput for unknown names."""
    if not isinstance(timezone, str) or not timezone.strip():
        raise InvalidInput(f"Timezone must be a non-empty IANA name, got {timezone!r}")
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInput(f"Unrecognized timezone: {timezone!r}") from exc


def parse_birth_local(birth_local: str, timezone: str) -> datetime:
    """
    Parse a birth date-time and attach the given zone.

    Args:
        birth_local: ISO-8601 local date-time, e.g. "1990-03-15T10:00:00".
            If it carries a UTC offset, the instant is converted into the zone.
        timezone: IANA zone name, e.g. "Asia/Shanghai"

    Returns:
        Timezone-aware datetime in the birth zone

    Raises:
        InvalidInput: unparseable date-time, unknown zone, or a year
            outside MIN_SUPPORTED_YEAR..MAX_SUPPORTED_YEAR
    """
    zone = resolve_zone(timezone)
    if not isinstance(birth_local, str):
        raise InvalidInput(f"Birth date-time must be an ISO string, got {birth_local!r}")
    text = birth_local.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidInput(f"Invalid ISO datetime: {birth_local!r}") from exc

    try:
        if parsed.tzinfo is None:
            local = parsed.replace(tzinfo=zone)
        else:
            local = parsed.astimezone(zone)
        utc = local.astimezone(dt_timezone.utc)
    except OverflowError as exc:
        raise InvalidInput(f"Birth date-time out of range: {birth_local!r}") from exc

    check_supported_year(local.year)
    check_supported_year(utc.year)
    return local


def check_supported_year(year: int) -> None:
    """Raise InvalidInput for a year the Moshier ephemeris cannot cover."""
    if not MIN_SUPPORTED_YEAR <= year <= MAX_SUPPORTED_YEAR:
        raise InvalidInput(
            f"Year {year} is outside the supported range "
            f"{MIN_SUPPORTED_YEAR}-{MAX_SUPPORTED_YEAR}"
        )


# ============================================================
# JULIAN DAY HELPERS
# ============================================================

def julian_day(instant: datetime) -> float:
    """Julian Day (UT) of a timezone-aware instant."""
    utc = instant.astimezone(dt_timezone.utc)
    hour = utc.hour + utc.minute / 60 + (utc.second + utc.microsecond / 1e6) / 3600
    return swe.julday(utc.year, utc.month, utc.day, hour)


def julian_day_number(day: date) -> int:
    """Integer Julian Day Number of a calendar date (JD at noon)."""
    return int(swe.julday(day.year, day.month, day.day, 12.0))


def day_sexagenary_index(day: date) -> int:
    """Position 0-59 of a calendar date in the sexagenary day cycle."""
    return (julian_day_number(day) + _JDN_SEXAGENARY_OFFSET) % 60


def sun_longitude(jd: float) -> float:
    """Apparent tropical ecliptic longitude of the Sun, in degrees."""
    try:
        xx, _ = swe.calc_ut(jd, swe.SUN, EPHE_FLAGS)
    except swe.Error as exc:
        raise InternalConsistency(f"Swiss Ephemeris could not place the Sun at JD {jd}") from exc
    return xx[0] % 360


# ============================================================
# SOLAR TERM COMPUTATION
# ============================================================
#
# The 12 Jie (节) solar terms mark BaZi month boundaries. The Sun reaches
# them every 30° of ecliptic longitude, starting from Li Chun at 315°.
# Swiss Ephemeris swe.solcross_ut() finds the exact crossing moment.

LI_CHUN_LONGITUDE = 315.0

# In month order from Li Chun (寅) to Xiao Han (丑)
JIE_NAMES = (
    "Li Chun", "Jing Zhe", "Qing Ming", "Li Xia", "Mang Zhong", "Xiao Shu",
    "Li Qiu", "Bai Lu", "Han Lu", "Li Dong", "Da Xue", "Xiao Han",
)

_MONTH_BRANCH_FROM_LI_CHUN = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 1)


@dataclass(frozen=True)
class JieTerm:
    name: str
    longitude: float
    branch_index: int  # month branch the term opens
    jd: float  # UT crossing


def _solar_crossing(longitude: float, jd_start: float) -> float:
    try:
        return swe.solcross_ut(float(longitude), jd_start, EPHE_FLAGS)
    except swe.Error as exc:
        raise InternalConsistency(
            f"Swiss Ephemeris could not find the Sun at {longitude}° after JD {jd_start}"
        ) from exc


def li_chun(year: int) -> float:
    """Julian Day (UT) of Li Chun, the start of the sexagenary year, in a Gregorian year."""
    return _solar_crossing(LI_CHUN_LONGITUDE, swe.julday(year, 1, 1, 0))


def month_branch_index(sun_lon: float) -> int:
    """
    Map the Sun's ecliptic longitude to the BaZi month branch index.

    Each month spans 30° starting from Li Chun (315° → 寅, index 2).
    """
    adjusted = (sun_lon - LI_CHUN_LONGITUDE) % 360
    return _MONTH_BRANCH_FROM_LI_CHUN[int(adjusted // 30)]


def find_jie_dates(year: int) -> tuple[JieTerm, ...]:
    """
    Compute the 12 Jie solar terms falling in a Gregorian year.

    Returns:
        JieTerm records in chronological order
    """
    jd_year_start = swe.julday(year, 1, 1, 0)
    terms = []
    for month, name in enumerate(JIE_NAMES):
        longitude = (LI_CHUN_LONGITUDE + 30 * month) % 360
        jd_cross = _solar_crossing(longitude, jd_year_start)
        # A crossing searched from Jan 1 can land in the next year
        if swe.revjul(jd_cross)[0] == year:
            terms.append(JieTerm(name, longitude, _MONTH_BRANCH_FROM_LI_CHUN[month], jd_cross))
    return tuple(sorted(terms, key=lambda t: t.jd))


def find_nearest_jie(jd: float, forward: bool) -> float:
    """
    Find the nearest Jie solar term in the given direction from an instant.

    Args:
        jd: Julian Day (UT) of the instant
        forward: True = next Jie after the instant, False = previous one

    Returns:
        Julian Day of the nearest Jie solar term
    """
    year = swe.revjul(jd)[0]
    crossings = sorted(
        term.jd
        for y in (year - 1, year, year + 1)
        for term in find_jie_dates(y)
    )

    if forward:
        for crossing in crossings:
            if crossing > jd:
                return crossing
    else:
        for crossing in reversed(crossings):
            if crossing < jd:
                return crossing

    raise InternalConsistency(f"Could not find {'next' if forward else 'previous'} Jie from JD {jd}")


def solar_term_start_age(instant: datetime, forward: bool) -> int:
    """
    Traditional luck-cycle starting age: days from birth to the nearest
    Jie in the direction of progression, three days counting as one year.
    """
    birth_jd = julian_day(instant)
    days_to_jie = abs(find_nearest_jie(birth_jd, forward) - birth_jd)
    start_age = int(days_to_jie / 3 + 0.5)
    logger.debug("Solar-term start age %d (%.2f days to Jie)", start_age, days_to_jie)
    return start_age


# ============================================================
# LUNAR DATE
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    year: int
    month: int
    day: int
    is_leap_month: bool
    label: str  # e.g. 一九九〇年二月十九

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "is_leap_month": self.is_leap_month,
            "label": self.label,
        }


def lunar_date(local: datetime) -> LunarDate:
    """Chinese lunisolar date of a local wall-clock date-time."""
    lunar = Solar.fromYmdHms(
        local.year, local.month, local.day, local.hour, local.minute, local.second
    ).getLunar()
    month = lunar.getMonth()
    return LunarDate(
        year=lunar.getYear(),
        month=abs(month),
        day=lunar.getDay(),
        is_leap_month=month < 0,
        label=lunar.toString(),
    )
