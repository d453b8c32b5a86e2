"""SVG day/night map renderer.

Produces a standalone SVG (and a self-contained HTML page around it for
st.components.v1.html()). The twilight overlay is embedded once as a PNG
data URI; the sun, moon, and terminator are vector elements on top.

Coordinate system: viewBox="0 0 width height" in canvas pixels, y down,
the same space Frame.sun_pixel / Frame.moon_pixel live in.
"""

from __future__ import annotations

import html

from daynightmap.i18n import phase_name, t
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
    overlay_data_uri,
    place_outline,
    sun_rays,
    to_hex,
)

_PANEL_BG = "#0d1b35"
_PANEL_FG = "#e8d5a3"


def _points(vertices: list[tuple[float, float]]) -> str:
    return " ".join(f"{x:.2f},{y:.2f}" for x, y in vertices)


def _graticule(frame: Frame) -> list[str]:
    mapper = ProjectionMapper(frame.projection, frame.width, frame.height)
    parts: list[str] = []
    for lng in range(-180, 181, GRATICULE_STEP):
        x, _ = mapper.geo_to_pixel(0.0, lng)
        parts.append(
            f'<line x1="{x:.2f}" y1="0" x2="{x:.2f}" y2="{frame.height}"'
            ' stroke="white" stroke-width="0.5" stroke-opacity="0.25"/>'
        )
    for lat in range(-90 + GRATICULE_STEP, 90, GRATICULE_STEP):
        pixel = mapper.project_visible(lat, 0.0)
        if pixel is not None:
            parts.append(
                f'<line x1="0" y1="{pixel[1]:.2f}" x2="{frame.width}" y2="{pixel[1]:.2f}"'
                ' stroke="white" stroke-width="0.5" stroke-opacity="0.25"/>'
            )
    return parts


def _sun(frame: Frame) -> list[str]:
    if frame.sun_pixel is None:
        return []
    cx, cy = frame.sun_pixel
    if frame.profile.kind is ProfileKind.GRAYSCALE:
        parts = [
            f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{SUN_GRAY_RADIUS}"'
            ' fill="white" stroke="black" stroke-width="2"/>'
        ]
        for (x1, y1), (x2, y2) in sun_rays((cx, cy)):
            parts.append(
                f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}"'
                ' stroke="black" stroke-width="1"/>'
            )
        return parts
    color = to_hex(frame.profile.sun_rgb)
    return [
        f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{SUN_GLOW_RADIUS}" fill="url(#sun-glow)"/>',
        f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{SUN_CORE_RADIUS}" fill="{color}"/>',
    ]


def _moon(frame: Frame) -> list[str]:
    if frame.moon_pixel is None:
        return []
    cx, cy = frame.moon_pixel
    glyph = frame.moon_glyph
    parts = [
        f'<circle cx="{cx:.2f}" cy="{cy:.2f}" r="{MOON_GLOW_RADIUS}" fill="url(#moon-glow)"/>',
        f'<polygon points="{_points(place_outline(glyph.disk_outline, (cx, cy)))}"'
        f' fill="{to_hex(glyph.shadow_rgb)}"/>',
    ]
    if glyph.lit_outline:
        parts.append(
            f'<polygon points="{_points(place_outline(glyph.lit_outline, (cx, cy)))}"'
            f' fill="{to_hex(glyph.lit_rgb)}"/>'
        )
    return parts


def render_svg(frame: Frame) -> str:
    """Return the map as a standalone SVG document string."""
    w, h = frame.width, frame.height
    sun_color = to_hex(frame.profile.sun_rgb)
    glow_color = to_hex(MOON_GLOW_RGB)

    body: list[str] = [f'<rect x="0" y="0" width="{w}" height="{h}" fill="{background_color(frame)}"/>']
    body += _graticule(frame)
    body.append(
        f'<image x="0" y="0" width="{w}" height="{h}" preserveAspectRatio="none"'
        f' style="image-rendering: pixelated" href="{overlay_data_uri(frame.overlay)}"/>'
    )
    if frame.terminator:
        body.append(
            f'<polyline points="{_points(list(frame.terminator))}" fill="none"'
            ' stroke="white" stroke-width="2" stroke-opacity="0.3"/>'
        )
    body += _sun(frame)
    body += _moon(frame)
    content = "\n  ".join(body)

    return f"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w} {h}" width="{w}" height="{h}">
  <defs>
    <radialGradient id="sun-glow" cx="50%" cy="50%" r="50%">
      <stop offset="0%" stop-color="{sun_color}" stop-opacity="0.8"/>
      <stop offset="100%" stop-color="{sun_color}" stop-opacity="0"/>
    </radialGradient>
    <radialGradient id="moon-glow" cx="50%" cy="50%" r="50%">
      <stop offset="0%" stop-color="{glow_color}" stop-opacity="0.8"/>
      <stop offset="100%" stop-color="{glow_color}" stop-opacity="0"/>
    </radialGradient>
  </defs>
  {content}
</svg>"""


def legend_lines(frame: Frame, lang: str = "en") -> list[str]:
    """Text panel lines: time, sub-points, phase, and observer times if known."""
    lines = [
        f"{t('current_time', lang)}: {frame.instant.strftime('%a, %d %b %Y %H:%M')} GMT",
        f"{t('sun', lang)}: {frame.sun.lat:.1f}°, {frame.sun.lng:.1f}°",
        f"{t('moon', lang)}: {frame.moon.lat:.1f}°, {frame.moon.lng:.1f}° "
        f"({frame.phase.symbol} {phase_name(frame.phase, lang)}, "
        f"{t('illuminated', lang, percent=frame.illuminated_percent)})",
    ]
    if frame.observer is not None:
        times = frame.observer.sun_times
        if times.polar_day:
            lines.append(t("polar_day", lang))
        elif times.polar_night:
            lines.append(t("polar_night", lang))
        elif times.sunrise is not None and times.sunset is not None:
            lines.append(
                f"{t('sunrise', lang)} {times.sunrise:%H:%M} UTC · "
                f"{t('sunset', lang)} {times.sunset:%H:%M} UTC · "
                f"{t('day_length', lang)} {times.day_length}"
            )
        lines.append(t(f"band_{int(frame.observer.band)}", lang))
    return lines


def render_svg_html(frame: Frame, lang: str = "en", minimal: bool = False) -> str:
    """Return a self-contained HTML page with the SVG map and a legend.

    Args:
        frame: Fully computed map frame.
        lang: Language code ('ko' or 'en') for the legend.
        minimal: Map only, stretched to fill its container, with no legend
            (for embedding).

    Returns:
        HTML string suitable for st.components.v1.html().
    """
    if minimal:
        legend_block = ""
        map_height = "100vh"
    else:
        legend = "<br>".join(html.escape(line) for line in legend_lines(frame, lang))
        legend_block = f'<div class="legend">{legend}</div>\n'
        map_height = "auto"
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    width: 100%;
    background: {_PANEL_BG};
    color: {_PANEL_FG};
    font-family: sans-serif;
}}
.map svg {{
    display: block;
    width: 100%;
    height: {map_height};
}}
.legend {{
    padding: 0.6rem 1rem;
    font-size: 0.9rem;
    line-height: 1.6;
}}
</style>
</head>
<body>
<div class="map">
{render_svg(frame)}
</div>
{legend_block}</body>
</html>"""
