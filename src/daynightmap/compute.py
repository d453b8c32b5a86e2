"""Render pipeline: Instant (+ observer) + RenderConfig → Frame.

render() is synchronous and side-effect free: it builds a fresh overlay
buffer on every call and never touches module state, so it can be driven
by the live loop, the Streamlit app, the CLI, or tests alike.
"""

import logging
import time
from datetime import datetime

from daynightmap.config import RenderConfig
from daynightmap.ephemeris import lunar_position, moon_phase, solar_position, sun_times
from daynightmap.models import CelestialPosition, Frame, GeoPoint, ObserverInfo
from daynightmap.moon import moon_glyph
from daynightmap.projection import ProjectionMapper
from daynightmap.raster import rasterize
from daynightmap.timeutil import now_utc, to_utc
from daynightmap.twilight import classify, solar_elevation, terminator_points

logger = logging.getLogger(__name__)


def resolve_instant(instant: datetime | None, config: RenderConfig) -> datetime:
    """Explicit instant, else the configured override, else the system clock."""
    if instant is not None:
        return to_utc(instant)
    if config.fixed_instant is not None:
        return to_utc(config.fixed_instant)
    return now_utc()


def observe(
    point: GeoPoint,
    instant: datetime,
    sun: CelestialPosition,
    moon: CelestialPosition,
    config: RenderConfig,
) -> ObserverInfo:
    """Location-dependent panel values for one observer."""
    elevation = solar_elevation(point, sun)
    return ObserverInfo(
        point=point,
        solar_elevation=elevation,
        band=classify(elevation, config.profile),
        # Same altitude formula, with the sub-lunar point as reference
        moon_elevation=solar_elevation(point, moon),
        sun_times=sun_times(instant, point),
    )


def render(
    instant: datetime | None = None,
    observer: GeoPoint | None = None,
    config: RenderConfig | None = None,
) -> Frame:
    """Compute everything one map frame needs.

    Args:
        instant: Moment to render. Falls back to config.fixed_instant, then now.
        observer: Optional observer; enables the sunrise/sunset panel.
        config: Canvas, projection, profile, and stride. Defaults apply if None.

    Returns:
        Frame holding the overlay buffer, glyph geometry, and derived info.
    """
    config = config or RenderConfig()
    started = time.perf_counter()
    when = resolve_instant(instant, config)

    sun = solar_position(when)
    moon = lunar_position(when)
    mapper = ProjectionMapper(config.projection, config.width, config.height)

    overlay = rasterize(sun, mapper, config.profile, config.stride)
    terminator = terminator_points(sun, mapper) if config.draw_terminator else ()

    frame = Frame(
        instant=when,
        width=config.width,
        height=config.height,
        projection=config.projection,
        profile=config.profile,
        overlay=overlay,
        sun=sun,
        moon=moon,
        phase=moon_phase(moon.elongation_deg or 0.0),
        sun_pixel=mapper.project_visible(sun.lat, sun.lng),
        moon_pixel=mapper.project_visible(moon.lat, moon.lng),
        moon_glyph=moon_glyph(moon, config.moon_radius, config.profile),
        terminator=terminator,
        observer=observe(observer, when, sun, moon, config) if observer else None,
    )
    logger.debug(
        "rendered %s (%s, %s) in %.1f ms",
        when.isoformat(),
        config.projection.value,
        config.profile.kind.value,
        (time.perf_counter() - started) * 1000,
    )
    return frame
