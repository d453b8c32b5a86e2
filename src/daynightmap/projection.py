"""Projection mapper: (lat, lng) ↔ canvas pixels for equirectangular and Mercator.

Both directions accept scalars or numpy arrays. Pixel y grows downward.
Longitude always maps linearly: x = (lng + 180) * width / 360.
"""

from dataclasses import dataclass

import numpy as np

from daynightmap.models import Projection

MERCATOR_MAX_LAT = 85.0  # Mercator diverges toward the poles; clip here


@dataclass(frozen=True)
class ProjectionMapper:
    """Forward/inverse projection bound to one canvas size."""

    projection: Projection
    width: int
    height: int

    def geo_to_pixel(self, lat, lng):
        """Project latitude/longitude (degrees) to pixel (x, y)."""
        lat = np.asarray(lat, dtype=float)
        lng = np.asarray(lng, dtype=float)
        x = (lng + 180.0) * (self.width / 360.0)
        if self.projection is Projection.MERCATOR:
            lat_rad = np.radians(lat)
            n = np.log(np.tan(np.pi / 4 + lat_rad / 2))
            y = self.height / 2 - self.width * n / (2 * np.pi)
        else:
            y = (90.0 - lat) * (self.height / 180.0)
        return _unwrap(x), _unwrap(y)

    def pixel_to_geo(self, x, y):
        """Inverse of geo_to_pixel. Returns (lat, lng) in degrees, lng in (-180, 180].

        The left edge (x = 0) is the same meridian as the right edge and comes
        back as +180.
        """
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        lng = x / self.width * 360.0 - 180.0
        lng = np.where(lng <= -180.0, lng + 360.0, lng)
        if self.projection is Projection.MERCATOR:
            n = (self.height / 2 - y) * 2 * np.pi / self.width
            lat = np.degrees(np.arctan(np.sinh(n)))
        else:
            lat = 90.0 - y * (180.0 / self.height)
        return _unwrap(lat), _unwrap(lng)

    def valid_latitude(self, lat):
        """Domain check: Mercator is only defined up to ±85°, equirectangular everywhere."""
        lat = np.asarray(lat, dtype=float)
        if self.projection is Projection.MERCATOR:
            ok = np.abs(lat) <= MERCATOR_MAX_LAT
        else:
            ok = np.abs(lat) <= 90.0
        return _unwrap(ok)

    def is_visible(self, x, y):
        """Whether a projected pixel falls on the canvas. Off-canvas is not an error."""
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        ok = (x >= 0) & (x <= self.width) & (y >= 0) & (y <= self.height)
        return _unwrap(ok)

    def project_visible(self, lat: float, lng: float) -> tuple[float, float] | None:
        """Project one point, or None when it lies outside the domain or canvas."""
        if not self.valid_latitude(lat):
            return None
        x, y = self.geo_to_pixel(lat, lng)
        if not self.is_visible(x, y):
            return None
        return float(x), float(y)


def _unwrap(a: np.ndarray):
    """0-d arrays back to Python scalars so scalar callers get scalars."""
    return a.item() if a.ndim == 0 else a
