"""Twilight rasterizer: paints the night overlay into one RGBA buffer.

The canvas is sampled every ``stride`` pixels on both axes. Each sample is
inverse-projected, classified against the sub-solar point, and its shade is
block-filled over a stride × stride square. The whole grid is evaluated in a
single numpy pass and handed to the sink as one buffer.
"""

import logging

import numpy as np

from daynightmap.models import CelestialPosition, GeoPoint, Profile
from daynightmap.projection import ProjectionMapper
from daynightmap.twilight import band_opacity, solar_elevation_grid

logger = logging.getLogger(__name__)

DEFAULT_STRIDE = 2


def sample_grid(mapper: ProjectionMapper, stride: int) -> tuple[np.ndarray, np.ndarray]:
    """Pixel coordinates of the top-left corner of every stride block."""
    xs = np.arange(0, mapper.width, stride, dtype=float)
    ys = np.arange(0, mapper.height, stride, dtype=float)
    return np.meshgrid(xs, ys)


def rasterize(
    sun: GeoPoint | CelestialPosition,
    mapper: ProjectionMapper,
    profile: Profile,
    stride: int = DEFAULT_STRIDE,
) -> np.ndarray:
    """Render the twilight overlay for one sub-solar point.

    Args:
        sun: Sub-solar point.
        mapper: Projection bound to the canvas size.
        profile: Shading profile (threshold table, color, alpha scale).
        stride: Sampling step in pixels, >= 1.

    Returns:
        (height, width, 4) uint8 RGBA buffer. Fully transparent where the
        sun is up or the projection is undefined.

    Raises:
        ValueError: If stride < 1.
    """
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")

    x, y = sample_grid(mapper, stride)
    lat, lng = mapper.pixel_to_geo(x, y)
    in_domain = mapper.valid_latitude(lat)

    elevation = solar_elevation_grid(lat, lng, sun)
    alpha = band_opacity(elevation, profile)
    alpha_byte = np.floor(alpha * 255 * profile.alpha_scale).astype(np.uint8)
    painted = in_domain & (alpha > 0)

    samples = np.zeros(x.shape + (4,), dtype=np.uint8)
    samples[painted, :3] = profile.overlay_rgb
    samples[painted, 3] = alpha_byte[painted]

    # Block fill, then clip the partial blocks on the right/bottom edges
    buffer = np.repeat(np.repeat(samples, stride, axis=0), stride, axis=1)
    buffer = buffer[: mapper.height, : mapper.width]

    logger.debug(
        "rasterized %d samples (%d painted, %d outside projection) at stride %d",
        x.size,
        int(painted.sum()),
        int((~in_domain).sum()),
        stride,
    )
    return np.ascontiguousarray(buffer)
