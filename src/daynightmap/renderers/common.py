"""Helpers shared by the renderers: colors, PNG encoding, glyph placement."""

import base64
import io
import math
from pathlib import Path

import numpy as np
from matplotlib import image as mpimg

from daynightmap.models import RGB, Frame, ProfileKind

# Background behind the overlay when no base map is supplied
COLOR_BG = "#2b5f8a"
GRAYSCALE_BG = "#bfbfbf"
GRATICULE_STEP = 30

SUN_GLOW_RADIUS = 30
SUN_CORE_RADIUS = 10
SUN_GRAY_RADIUS = 12
SUN_RAY_INNER = 15
SUN_RAY_OUTER = 20
MOON_GLOW_RADIUS = 25
MOON_GLOW_RGB: RGB = (220, 220, 220)


def default_output_path(frame: Frame, suffix: str) -> Path:
    """results/daynight__<projection>__<time>.<suffix>, relative to the working directory."""
    when_str = frame.instant.strftime("%Y_%m_%d_%H_%M")
    return Path("results") / f"daynight__{frame.projection.value}__{when_str}.{suffix}"


def to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def background_color(frame: Frame) -> str:
    return GRAYSCALE_BG if frame.profile.kind is ProfileKind.GRAYSCALE else COLOR_BG


def overlay_png(buffer: np.ndarray) -> bytes:
    """Encode an RGBA uint8 buffer as PNG bytes."""
    out = io.BytesIO()
    mpimg.imsave(out, buffer, format="png")
    return out.getvalue()


def overlay_data_uri(buffer: np.ndarray) -> str:
    return "data:image/png;base64," + base64.b64encode(overlay_png(buffer)).decode("ascii")


def place_outline(
    outline: tuple[tuple[float, float], ...],
    centre: tuple[float, float],
) -> list[tuple[float, float]]:
    """Move glyph vertices (y up) to canvas pixels (y down) around centre."""
    cx, cy = centre
    return [(cx + x, cy - y) for x, y in outline]


def sun_rays(centre: tuple[float, float]) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """Eight short ray segments around the grayscale sun."""
    cx, cy = centre
    rays = []
    for i in range(8):
        angle = i * math.pi / 4
        c, s = math.cos(angle), math.sin(angle)
        rays.append(
            (
                (cx + c * SUN_RAY_INNER, cy + s * SUN_RAY_INNER),
                (cx + c * SUN_RAY_OUTER, cy + s * SUN_RAY_OUTER),
            )
        )
    return rays
