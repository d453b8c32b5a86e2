"""Solar elevation, twilight band classification, and the stock shading profiles.

Threshold tables are plain data handed to every call through a Profile;
nothing here reads global state.
"""

import math

import numpy as np

from daynightmap.models import (
    BandStop,
    CelestialPosition,
    GeoPoint,
    Profile,
    ProfileKind,
    ShadeSample,
    TwilightBand,
)
from daynightmap.projection import ProjectionMapper

# Smooth gradient: each band fades from its floor opacity to the next band's.
COLOR_TABLE: tuple[BandStop, ...] = (
    BandStop(TwilightBand.DAY, 0.0, 0.0),
    BandStop(TwilightBand.CIVIL, -1.0, 0.2),
    BandStop(TwilightBand.NAUTICAL, -6.0, 0.6),
    BandStop(TwilightBand.ASTRONOMICAL, -12.0, 0.8),
    BandStop(TwilightBand.NIGHT, -90.0, 0.8),
)

# Fewer, wider, flat steps so low-color displays stay legible.
GRAYSCALE_TABLE: tuple[BandStop, ...] = (
    BandStop(TwilightBand.DAY, 0.0, 0.0),
    BandStop(TwilightBand.CIVIL, -6.0, 0.25),
    BandStop(TwilightBand.NIGHT, -90.0, 0.70),
)

COLOR_PROFILE = Profile(
    kind=ProfileKind.COLOR,
    table=COLOR_TABLE,
    smooth=True,
    overlay_rgb=(0, 0, 30),
    alpha_scale=0.75,
    moon_lit_rgb=(240, 240, 240),
    moon_shadow_rgb=(96, 96, 96),
    sun_rgb=(255, 215, 0),
)

GRAYSCALE_PROFILE = Profile(
    kind=ProfileKind.GRAYSCALE,
    table=GRAYSCALE_TABLE,
    smooth=False,
    overlay_rgb=(0, 0, 0),
    alpha_scale=1.0,
    moon_lit_rgb=(255, 255, 255),
    moon_shadow_rgb=(0, 0, 0),
    sun_rgb=(255, 255, 255),
)

PROFILES: dict[ProfileKind, Profile] = {
    ProfileKind.COLOR: COLOR_PROFILE,
    ProfileKind.GRAYSCALE: GRAYSCALE_PROFILE,
}


def solar_elevation(point: GeoPoint, sun: GeoPoint | CelestialPosition) -> float:
    """Altitude of the sun (degrees) seen from point, given the sub-solar point.

    Great-circle altitude with the sub-solar point as zenith reference:
    asin(sin φ sin φs + cos φ cos φs cos(λ - λs)).
    """
    return float(solar_elevation_grid(point.lat, point.lng, sun))


def solar_elevation_grid(lat, lng, sun: GeoPoint | CelestialPosition):
    """Vectorized solar_elevation over arrays of latitudes/longitudes."""
    lat_rad = np.radians(lat)
    sun_lat = math.radians(sun.lat)
    dlng = np.radians(np.asarray(lng, dtype=float) - sun.lng)
    s = np.sin(lat_rad) * math.sin(sun_lat) + np.cos(lat_rad) * math.cos(sun_lat) * np.cos(dlng)
    return np.degrees(np.arcsin(np.clip(s, -1.0, 1.0)))


def _floors(profile: Profile) -> np.ndarray:
    return np.array([s.floor_deg for s in profile.table], dtype=float)


def _opacities(profile: Profile) -> np.ndarray:
    return np.array([s.opacity for s in profile.table], dtype=float)


def _band_index(elevation, profile: Profile):
    # Number of floors strictly above the elevation == index of its band
    idx = np.searchsorted(-_floors(profile), -np.asarray(elevation, dtype=float), side="left")
    return np.minimum(idx, len(profile.table) - 1)


def classify(elevation: float, profile: Profile) -> TwilightBand:
    """Band containing the elevation: the first row whose floor it reaches."""
    return profile.table[int(_band_index(elevation, profile))].band


def band_opacity(elevation, profile: Profile):
    """Overlay opacity (0..1, before alpha_scale) for scalar or array elevations."""
    if profile.smooth:
        # np.interp wants ascending x
        alpha = np.interp(elevation, _floors(profile)[::-1], _opacities(profile)[::-1])
    else:
        alpha = _opacities(profile)[_band_index(elevation, profile)]
    if np.ndim(alpha) == 0:
        return float(alpha)
    return alpha


def shade(elevation: float, profile: Profile) -> ShadeSample:
    return ShadeSample(color=profile.overlay_rgb, alpha=band_opacity(elevation, profile))


def terminator_points(
    sun: GeoPoint | CelestialPosition,
    mapper: ProjectionMapper,
    step_deg: float = 2.0,
) -> tuple[tuple[float, float], ...]:
    """Pixel polyline of the day/night boundary (elevation = 0).

    Solved per longitude: tan(lat) = -cos(lng - sun_lng) / tan(sun_lat).
    At an equinox the boundary turns into two meridians; a tiny declination
    keeps the formula finite there. Invisible points are dropped.
    """
    sun_lat = sun.lat
    if abs(sun_lat) < 1e-6:
        sun_lat = math.copysign(1e-6, sun_lat)
    lng = np.arange(-180.0, 180.0 + step_deg / 2, step_deg)
    lat = np.degrees(np.arctan(-np.cos(np.radians(lng - sun.lng)) / math.tan(math.radians(sun_lat))))

    valid = mapper.valid_latitude(lat)
    x, y = mapper.geo_to_pixel(np.where(valid, lat, 0.0), lng)
    keep = valid & mapper.is_visible(x, y)
    return tuple((float(px), float(py)) for px, py in zip(x[keep], y[keep]))
