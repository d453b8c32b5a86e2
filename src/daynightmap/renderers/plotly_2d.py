"""Plotly 2D interactive day/night map renderer.

The overlay buffer goes in as a single go.Image trace (PNG data URI); the
sun and moon are a marker trace with hover text, and the moon phase is a
pair of filled SVG-path shapes. Wheel zoom and drag panning are enabled.
"""

import plotly.graph_objects as go

from daynightmap.models import Frame
from daynightmap.renderers.common import (
    SUN_CORE_RADIUS,
    background_color,
    overlay_data_uri,
    place_outline,
    to_hex,
)


def _path(vertices: list[tuple[float, float]]) -> str:
    head, *rest = vertices
    return f"M {head[0]:.2f},{head[1]:.2f} " + " ".join(f"L {x:.2f},{y:.2f}" for x, y in rest) + " Z"


def render_plotly_map(frame: Frame) -> go.Figure:
    """Render a Frame as a Plotly figure in canvas pixel coordinates.

    Args:
        frame: Fully computed map frame.

    Returns:
        Plotly Figure object.
    """
    w, h = frame.width, frame.height
    overlay = go.Image(source=overlay_data_uri(frame.overlay), x0=0, y0=0, dx=1, dy=1, hoverinfo="skip")

    xs: list[float] = []
    ys: list[float] = []
    labels: list[str] = []
    colors: list[str] = []
    if frame.sun_pixel is not None:
        xs.append(frame.sun_pixel[0])
        ys.append(frame.sun_pixel[1])
        labels.append(f"Sun {frame.sun.lat:.1f}°, {frame.sun.lng:.1f}°")
        colors.append(to_hex(frame.profile.sun_rgb))
    if frame.moon_pixel is not None:
        xs.append(frame.moon_pixel[0])
        ys.append(frame.moon_pixel[1])
        labels.append(
            f"Moon {frame.moon.lat:.1f}°, {frame.moon.lng:.1f}° "
            f"({frame.phase.label}, {frame.illuminated_percent}%)"
        )
        colors.append("rgba(0,0,0,0)")  # Moon body is drawn as shapes below

    bodies = go.Scatter(
        x=xs,
        y=ys,
        mode="markers",
        marker=dict(size=SUN_CORE_RADIUS * 2, color=colors, line=dict(width=0)),
        text=labels,
        hoverinfo="text",
        name="bodies",
    )

    shapes: list[dict] = []
    if frame.terminator:
        shapes.append(
            dict(
                type="path",
                path=_path(list(frame.terminator))[:-2],  # Open polyline
                line=dict(color="rgba(255,255,255,0.3)", width=2),
            )
        )
    if frame.moon_pixel is not None:
        glyph = frame.moon_glyph
        shapes.append(
            dict(
                type="path",
                path=_path(place_outline(glyph.disk_outline, frame.moon_pixel)),
                fillcolor=to_hex(glyph.shadow_rgb),
                line=dict(width=0),
            )
        )
        if glyph.lit_outline:
            shapes.append(
                dict(
                    type="path",
                    path=_path(place_outline(glyph.lit_outline, frame.moon_pixel)),
                    fillcolor=to_hex(glyph.lit_rgb),
                    line=dict(width=0),
                )
            )

    fig = go.Figure(data=[overlay, bodies])
    bg = background_color(frame)
    fig.update_layout(
        paper_bgcolor=bg,
        plot_bgcolor=bg,
        showlegend=False,
        margin=dict(l=0, r=0, t=0, b=0),
        width=w,
        height=h,
        dragmode="pan",
        xaxis=dict(visible=False, range=[0, w], autorange=False),
        # Canvas y grows downward
        yaxis=dict(visible=False, range=[h, 0], autorange=False, scaleanchor="x"),
        shapes=shapes,
    )
    fig._config = {"scrollZoom": True, "displayModeBar": False}  # type: ignore[attr-defined]
    return fig
