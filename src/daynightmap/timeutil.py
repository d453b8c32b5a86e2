"""Time normalization: UTC instants to day-of-year, hour fraction, and Julian Date."""

from datetime import datetime

from pytz import utc

from daynightmap.models import TimeParts

J2000 = 2451545.0  # JD of 2000-01-01 12:00 TT
DAYS_PER_CENTURY = 36525.0


def to_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return utc.localize(dt)
    return dt.astimezone(utc)


def now_utc() -> datetime:
    return datetime.now(utc)


def julian_day_number(year: int, month: int, day: int) -> int:
    """Fliegel–Van Flandern day number of a proleptic Gregorian date (at noon)."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def julian_date(instant: datetime) -> float:
    """Julian Date of an instant, continuous across UTC midnight."""
    t = to_utc(instant)
    seconds = t.second + t.microsecond / 1e6
    return (
        julian_day_number(t.year, t.month, t.day)
        + (t.hour - 12) / 24
        + t.minute / 1440
        + seconds / 86400
    )


def time_parts(instant: datetime) -> TimeParts:
    """Decompose an instant into the quantities the ephemerides consume.

    Args:
        instant: Any datetime; naive values are interpreted as UTC.

    Returns:
        TimeParts with day_of_year (Jan 1 = 1), fractional UTC hours, and JD.
    """
    t = to_utc(instant)
    hours = t.hour + t.minute / 60 + (t.second + t.microsecond / 1e6) / 3600
    return TimeParts(
        day_of_year=t.timetuple().tm_yday,
        utc_hours=hours,
        julian_date=julian_date(t),
    )
