"""Reference ephemeris: skyfield + JPL DE421 sub-points and moon phase.

Used to cross-check the low-order model (and the waxing/waning orientation
of the silhouette). The ephemeris file is opened lazily from resources/;
skyfield downloads it there on first use if it is missing.
"""

import logging
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from skyfield import almanac
from skyfield.api import Loader, wgs84

from daynightmap.models import CelestialPosition, GeoPoint, wrap_longitude
from daynightmap.timeutil import to_utc

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).parent.parent.parent
_RESOURCES = _ROOT / "resources"
EPHEMERIS_FILE = "de421.bsp"

_loader = Loader(str(_RESOURCES), verbose=False)


def ephemeris_available() -> bool:
    """True when the ephemeris is already on disk (no download needed)."""
    return (_RESOURCES / EPHEMERIS_FILE).exists()


@lru_cache(maxsize=1)
def _ephemeris():
    logger.info("loading %s from %s", EPHEMERIS_FILE, _RESOURCES)
    return _loader(EPHEMERIS_FILE)


def _subpoint(position) -> GeoPoint:
    sp = wgs84.subpoint_of(position)
    return GeoPoint(lat=float(sp.latitude.degrees), lng=wrap_longitude(float(sp.longitude.degrees)))


def reference_positions(instant: datetime) -> tuple[CelestialPosition, CelestialPosition]:
    """Accurate (sun, moon) sub-points for an instant.

    The moon carries skyfield's phase angle as elongation (0 new, 90 first
    quarter, 180 full) and its illuminated fraction.
    """
    eph = _ephemeris()
    t = _loader.timescale().from_datetime(to_utc(instant))
    earth = eph["earth"]

    sun = CelestialPosition(point=_subpoint(earth.at(t).observe(eph["sun"]).apparent()))
    moon = CelestialPosition(
        point=_subpoint(earth.at(t).observe(eph["moon"]).apparent()),
        elongation_deg=float(almanac.moon_phase(eph, t).degrees) % 360.0,
        illuminated_fraction=float(almanac.fraction_illuminated(eph, "moon", t)),
    )
    return sun, moon
