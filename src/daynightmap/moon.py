"""Moon-phase silhouette: lit region of the disk as an explicit polygon.

Geometry is in glyph units: origin at the disk centre, y pointing up.

The terminator is a half-ellipse with vertical semi-axis ``radius`` and
horizontal semi-axis ``a = radius * |2f - 1|``. The lit region is bounded
by the lit-side limb and that half-ellipse:

  - crescent (f < 0.5): the ellipse bows toward the lit limb;
  - gibbous (f >= 0.5): disk minus the dark crescent, so the ellipse bows
    toward the dark side.

Both cases reduce to one signed semi-axis, ``k = 1 - 2f``, which passes
through zero (a straight diameter) at f = 0.5 without a seam.
"""

import math

import numpy as np
from matplotlib.path import Path

from daynightmap.models import CelestialPosition, MoonGlyph, Profile

DEFAULT_STEPS = 48

Outline = tuple[tuple[float, float], ...]


def terminator_half_width(radius: float, fraction: float) -> float:
    return radius * abs(2 * fraction - 1)


def _half_angles(steps: int) -> np.ndarray:
    # Top (π/2) to bottom (-π/2)
    return np.linspace(math.pi / 2, -math.pi / 2, steps + 1)


def disk_outline(radius: float, steps: int = DEFAULT_STEPS) -> Outline:
    """Polygonal disk sampled at the same angles the lit outline uses."""
    theta = _half_angles(steps)
    right = [(radius * math.cos(t), radius * math.sin(t)) for t in theta]
    left = [(-radius * math.cos(t), radius * math.sin(t)) for t in theta[::-1][1:-1]]
    return tuple(right + left)


def lit_outline(
    fraction: float,
    waxing: bool,
    radius: float,
    steps: int = DEFAULT_STEPS,
) -> Outline:
    """Polygon of the illuminated part of the disk.

    Args:
        fraction: Illuminated fraction, clamped to [0, 1].
        waxing: Lit limb on the right when True, on the left otherwise.
        radius: Disk radius.
        steps: Angular steps per half-circle.

    Returns:
        Closed polygon vertices (first vertex not repeated). Empty at f = 0;
        the whole disk at f = 1.
    """
    f = min(max(fraction, 0.0), 1.0)
    if f <= 0.0:
        return ()
    if f >= 1.0:
        return disk_outline(radius, steps)

    side = 1.0 if waxing else -1.0
    k = 1.0 - 2.0 * f
    theta = _half_angles(steps)

    limb = [(side * radius * math.cos(t), radius * math.sin(t)) for t in theta]
    # Bottom back to top; limb already holds both poles
    terminator = [
        (side * k * radius * math.cos(t), radius * math.sin(t)) for t in theta[::-1][1:-1]
    ]
    return tuple(limb + terminator)


def moon_glyph(
    moon: CelestialPosition,
    radius: float,
    profile: Profile,
    steps: int = DEFAULT_STEPS,
) -> MoonGlyph:
    """Vector glyph for a lunar position under the given profile colors."""
    return MoonGlyph(
        radius=radius,
        disk_outline=disk_outline(radius, steps),
        lit_outline=lit_outline(moon.illuminated_fraction or 0.0, moon.waxing, radius, steps),
        lit_rgb=profile.moon_lit_rgb,
        shadow_rgb=profile.moon_shadow_rgb,
    )


def rasterize_glyph(glyph: MoonGlyph, size: int | None = None) -> np.ndarray:
    """Paint the glyph into a square RGBA buffer (shadow disk, then lit region).

    Pixels outside the disk stay fully transparent.
    """
    if size is None:
        size = max(1, int(math.ceil(2 * glyph.radius)))
    r = glyph.radius
    centres = (np.arange(size) + 0.5) * (2 * r / size)
    xx, yy = np.meshgrid(centres - r, r - centres)
    points = np.column_stack([xx.ravel(), yy.ravel()])

    image = np.zeros((size, size, 4), dtype=np.uint8)
    in_disk = Path(glyph.disk_outline).contains_points(points).reshape(size, size)
    image[in_disk] = (*glyph.shadow_rgb, 255)
    if glyph.lit_outline:
        in_lit = Path(glyph.lit_outline).contains_points(points).reshape(size, size)
        image[in_disk & in_lit] = (*glyph.lit_rgb, 255)
    return image
