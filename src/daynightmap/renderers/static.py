"""Matplotlib static PNG renderer."""

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Polygon

from daynightmap.models import Frame, ProfileKind
from daynightmap.projection import ProjectionMapper
from daynightmap.renderers.common import (
    GRATICULE_STEP,
    MOON_GLOW_RADIUS,
    MOON_GLOW_RGB,
    SUN_CORE_RADIUS,
    SUN_GLOW_RADIUS,
    SUN_GRAY_RADIUS,
    background_color,
    default_output_path,
    place_outline,
    sun_rays,
    to_hex,
)

_DPI = 100


def _glow(ax, centre: tuple[float, float], radius: float, color: str, peak: float) -> None:
    """Approximate a radial gradient with stacked translucent disks."""
    rings = 8
    for i in range(rings):
        r = radius * (rings - i) / rings
        ax.add_patch(Circle(centre, r, color=color, alpha=peak / rings, linewidth=0, zorder=3))


def _draw_graticule(ax, frame: Frame) -> None:
    mapper = ProjectionMapper(frame.projection, frame.width, frame.height)
    for lng in range(-180, 181, GRATICULE_STEP):
        x, _ = mapper.geo_to_pixel(0.0, lng)
        ax.axvline(x, color="white", linewidth=0.4, alpha=0.25, zorder=1)
    for lat in range(-90 + GRATICULE_STEP, 90, GRATICULE_STEP):
        pixel = mapper.project_visible(lat, 0.0)
        if pixel is not None:
            ax.axhline(pixel[1], color="white", linewidth=0.4, alpha=0.25, zorder=1)


def _draw_sun(ax, frame: Frame) -> None:
    centre = frame.sun_pixel
    if centre is None:
        return
    if frame.profile.kind is ProfileKind.GRAYSCALE:
        # High contrast sun: white disk, black border, eight rays
        ax.add_patch(
            Circle(centre, SUN_GRAY_RADIUS, facecolor="white", edgecolor="black", linewidth=2, zorder=4)
        )
        for (x1, y1), (x2, y2) in sun_rays(centre):
            ax.plot([x1, x2], [y1, y2], color="black", linewidth=1, zorder=4)
        return
    color = to_hex(frame.profile.sun_rgb)
    _glow(ax, centre, SUN_GLOW_RADIUS, color, peak=0.8)
    ax.add_patch(Circle(centre, SUN_CORE_RADIUS, color=color, linewidth=0, zorder=4))


def _draw_moon(ax, frame: Frame) -> None:
    centre = frame.moon_pixel
    if centre is None:
        return
    glyph = frame.moon_glyph
    _glow(ax, centre, MOON_GLOW_RADIUS, to_hex(MOON_GLOW_RGB), peak=0.8)
    ax.add_patch(
        Polygon(
            place_outline(glyph.disk_outline, centre),
            closed=True,
            facecolor=to_hex(glyph.shadow_rgb),
            linewidth=0,
            zorder=4,
        )
    )
    if glyph.lit_outline:
        ax.add_patch(
            Polygon(
                place_outline(glyph.lit_outline, centre),
                closed=True,
                facecolor=to_hex(glyph.lit_rgb),
                linewidth=0,
                zorder=5,
            )
        )


def render_static_map(frame: Frame, base_map: Path | None = None) -> Figure:
    """Render a Frame as a static matplotlib image at the frame's pixel size.

    Args:
        frame: Fully computed map frame.
        base_map: Optional world image stretched under the overlay. It must
            already be in the frame's projection.

    Returns:
        matplotlib Figure object.
    """
    w, h = frame.width, frame.height
    fig = plt.figure(figsize=(w / _DPI, h / _DPI), dpi=_DPI)
    ax = fig.add_axes((0, 0, 1, 1))
    # axis("off") hides the axes patch, so the figure carries the background
    fig.patch.set_facecolor(background_color(frame))

    if base_map is not None:
        ax.imshow(plt.imread(base_map), extent=(0, w, h, 0), zorder=0)
    else:
        _draw_graticule(ax, frame)

    ax.imshow(frame.overlay, extent=(0, w, h, 0), interpolation="nearest", zorder=2)

    if frame.terminator:
        xs, ys = zip(*frame.terminator)
        ax.plot(xs, ys, color="white", linewidth=2, alpha=0.3, zorder=3)

    _draw_sun(ax, frame)
    _draw_moon(ax, frame)

    ax.set_xlim(0, w)
    ax.set_ylim(h, 0)
    ax.set_aspect("auto")
    ax.axis("off")
    return fig


def save_static_map(
    frame: Frame,
    output_path: Path | None = None,
    base_map: Path | None = None,
) -> Path:
    """Save a Frame as a PNG file.

    Args:
        frame: Fully computed map frame.
        output_path: Destination path. Defaults to results/ under the
            working directory.
        base_map: Optional background image (see render_static_map).

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = default_output_path(frame, "png")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_map(frame, base_map=base_map)
    fig.savefig(output_path, dpi=_DPI, facecolor=background_color(frame))
    plt.close(fig)
    return output_path
