"""Low-order solar and lunar ephemerides, moon phase, and sunrise/sunset.

Accuracy is about one degree, which is plenty for a world-map overlay.
The solar model is first order: no equation of time and no eccentricity
correction. The lunar model is a truncated periodic-term theory with six
longitude terms and three latitude terms.
"""

import math
from datetime import date, datetime, timedelta

from pytz import utc

from daynightmap.models import (
    CelestialPosition,
    DomainError,
    GeoPoint,
    MoonPhase,
    SunTimes,
    wrap_longitude,
)
from daynightmap.timeutil import DAYS_PER_CENTURY, J2000, time_parts

OBLIQUITY_DEG = 23.439
SOLAR_TILT_DEG = 23.45
SUNRISE_ALTITUDE_DEG = -0.833  # Refraction + solar semi-diameter

_PHASES: tuple[MoonPhase, ...] = tuple(MoonPhase)


# =================================================================
# Sun
# =================================================================


def solar_declination(day_of_year: float) -> float:
    """Declination in degrees; minimum lands near day -10 (Dec 21 solstice)."""
    return -SOLAR_TILT_DEG * math.cos(2 * math.pi * (day_of_year + 10) / 365.25)


def solar_position(instant: datetime) -> CelestialPosition:
    """Sub-solar point: declination as latitude, 15°/hour west from 0° at 12:00 UTC."""
    parts = time_parts(instant)
    lat = solar_declination(parts.day_of_year)
    lng = wrap_longitude(-(parts.utc_hours - 12) * 15)
    return CelestialPosition(point=GeoPoint(lat=lat, lng=lng))


# =================================================================
# Moon
# =================================================================


def normalize_degrees(angle: float) -> float:
    """Angle into [0, 360). A plain modulo can round a tiny negative up to 360.0."""
    angle %= 360.0
    if angle >= 360.0:
        angle -= 360.0
    return angle


def illuminated_fraction(elongation_deg: float) -> float:
    """Fraction of the disk lit for a given Moon–Sun elongation (0 new, 1 full)."""
    phase_angle = math.radians(180.0 - elongation_deg)
    return (1 + math.cos(phase_angle)) / 2


def moon_phase(elongation_deg: float) -> MoonPhase:
    """Classify an elongation into one of eight 45°-wide phase sectors.

    Sectors are centred on 0, 45, ..., 315 degrees; the New Moon sector
    wraps across 0/360.

    Raises:
        DomainError: If elongation is not a finite number.
    """
    if not math.isfinite(elongation_deg):
        raise DomainError(f"elongation must be finite: {elongation_deg}")
    e = elongation_deg % 360.0
    index = int(((e + 22.5) % 360.0) // 45.0)
    return _PHASES[index]


def _moon_ecliptic(d: float) -> tuple[float, float, float]:
    """Ecliptic longitude/latitude of the Moon (degrees) and Sun's mean anomaly."""
    lm = (218.316 + 13.176396 * d) % 360
    mm = math.radians((134.963 + 13.064993 * d) % 360)
    ms = (357.529 + 0.98560028 * d) % 360
    f = math.radians((93.272 + 13.229350 * d) % 360)
    ms_rad = math.radians(ms)

    lam = (
        lm
        + 6.289 * math.sin(mm)
        + 1.274 * math.sin(2 * f - mm)
        + 0.658 * math.sin(2 * f)
        + 0.214 * math.sin(2 * mm)
        - 0.186 * math.sin(ms_rad)
        - 0.114 * math.sin(2 * f)
    )
    beta = (
        5.128 * math.sin(f)
        + 0.280 * math.sin(mm + f)
        + 0.277 * math.sin(mm - f)
    )
    return lam, beta, ms


def ecliptic_to_equatorial(lam_deg: float, beta_deg: float) -> tuple[float, float]:
    """Rotate ecliptic (λ, β) through the obliquity into (RA, Dec), degrees.

    RA is returned in [0, 360).
    """
    lam = math.radians(lam_deg)
    beta = math.radians(beta_deg)
    eps = math.radians(OBLIQUITY_DEG)
    alpha = math.atan2(
        math.sin(lam) * math.cos(eps) - math.tan(beta) * math.sin(eps),
        math.cos(lam),
    )
    delta = math.asin(
        math.sin(beta) * math.cos(eps)
        + math.cos(beta) * math.sin(eps) * math.sin(lam)
    )
    return math.degrees(alpha) % 360.0, math.degrees(delta)


def greenwich_sidereal_time(d: float) -> float:
    """GST in degrees [0, 360) for d days since J2000."""
    t = d / DAYS_PER_CENTURY
    return (280.46061837 + 360.98564736629 * d + 0.000387933 * t * t) % 360.0


def sun_apparent_longitude(d: float, ms_deg: float) -> float:
    """Sun's ecliptic longitude with the equation-of-centre correction."""
    ls = (280.460 + 0.98564736 * d) % 360
    ms = math.radians(ms_deg)
    return ls + 1.915 * math.sin(ms) + 0.020 * math.sin(2 * ms)


def lunar_position(instant: datetime) -> CelestialPosition:
    """Sub-lunar point plus elongation and illuminated fraction.

    Args:
        instant: Moment to evaluate; naive values are taken as UTC.

    Returns:
        CelestialPosition with declination as latitude, RA - GST as
        longitude, and the phase quantities filled in.
    """
    d = time_parts(instant).julian_date - J2000
    lam, beta, ms = _moon_ecliptic(d)
    ra, dec = ecliptic_to_equatorial(lam, beta)
    lng = wrap_longitude(ra - greenwich_sidereal_time(d))

    elongation = normalize_degrees(lam - sun_apparent_longitude(d, ms))
    return CelestialPosition(
        point=GeoPoint(lat=dec, lng=lng),
        elongation_deg=elongation,
        illuminated_fraction=illuminated_fraction(elongation),
    )


# =================================================================
# Sunrise / sunset
# =================================================================


def _as_date(day: date | datetime) -> date:
    if isinstance(day, datetime):
        if day.tzinfo is not None:
            day = day.astimezone(utc)
        return day.date()
    return day


def sun_times(
    day: date | datetime,
    point: GeoPoint,
    altitude_deg: float = SUNRISE_ALTITUDE_DEG,
) -> SunTimes:
    """Times (UTC) when the sun crosses altitude_deg at the given point.

    The same first-order solar model as solar_position is used: solar noon
    falls at 12 - lng/15 hours UTC.

    Args:
        day: Calendar date (UTC). Datetimes are reduced to their UTC date.
        point: Observer location.
        altitude_deg: Crossing altitude; -0.833 for sunrise/sunset.

    Returns:
        SunTimes with sunrise/sunset, or polar_day/polar_night set when the
        hour-angle cosine falls outside [-1, 1].
    """
    d = _as_date(day)
    dec = math.radians(solar_declination(d.timetuple().tm_yday))
    phi = math.radians(point.lat)
    numerator = math.sin(math.radians(altitude_deg)) - math.sin(phi) * math.sin(dec)
    denominator = math.cos(phi) * math.cos(dec)

    if abs(denominator) < 1e-12:
        # At a pole the sun's altitude is constant over the day
        if numerator < 0:
            return SunTimes(polar_day=True)
        return SunTimes(polar_night=True)

    cos_h = numerator / denominator
    if cos_h < -1.0:
        return SunTimes(polar_day=True)
    if cos_h > 1.0:
        return SunTimes(polar_night=True)

    half_day_hours = math.degrees(math.acos(cos_h)) / 15.0
    noon_hours = 12.0 - point.lng / 15.0
    midnight = datetime(d.year, d.month, d.day, tzinfo=utc)
    return SunTimes(
        sunrise=midnight + timedelta(hours=noon_hours - half_day_hours),
        sunset=midnight + timedelta(hours=noon_hours + half_day_hours),
    )


TWILIGHT_DEPRESSION = {
    "civil": 6.0,
    "nautical": 12.0,
    "astronomical": 18.0,
}


def twilight_times(day: date | datetime, point: GeoPoint, kind: str = "civil") -> SunTimes:
    """Dawn (as sunrise) and dusk (as sunset) for civil/nautical/astronomical twilight.

    Raises:
        DomainError: If kind is not one of TWILIGHT_DEPRESSION.
    """
    try:
        depression = TWILIGHT_DEPRESSION[kind]
    except KeyError:
        choices = ", ".join(TWILIGHT_DEPRESSION)
        raise DomainError(f"unknown twilight kind {kind!r}; expected one of: {choices}") from None
    return sun_times(day, point, altitude_deg=-depression)
