import dataclasses
from datetime import datetime

import numpy as np
import pytest
from pytz import utc

from daynightmap.compute import render, resolve_instant
from daynightmap.config import RenderConfig
from daynightmap.models import GeoPoint, MoonPhase, Projection, TwilightBand
from daynightmap.twilight import GRAYSCALE_PROFILE


def test_render_uses_fixed_instant(small_config, jan10_noon):
    frame = render(config=small_config)
    assert frame.instant == jan10_noon
    assert frame.overlay.shape == (180, 360, 4)
    assert frame.sun.lat == pytest.approx(-22.08, abs=0.05)
    assert frame.sun.lng == pytest.approx(0.0, abs=0.01)


def test_explicit_instant_wins(small_config):
    other = datetime(2024, 6, 21, 0, 0, tzinfo=utc)
    frame = render(other, config=small_config)
    assert frame.instant == other
    assert abs(frame.sun.lng) == pytest.approx(180.0)


def test_naive_instant_is_utc(small_config):
    frame = render(datetime(2024, 6, 21, 12, 0), config=small_config)
    assert frame.instant == datetime(2024, 6, 21, 12, 0, tzinfo=utc)


def test_falls_back_to_clock():
    before = datetime.now(utc)
    when = resolve_instant(None, RenderConfig())
    assert before <= when <= datetime.now(utc)


def test_sun_pixel_equirectangular(small_config):
    frame = render(config=small_config)
    x, y = frame.sun_pixel
    assert x == pytest.approx(180.0, abs=0.01)
    assert y == pytest.approx(90.0 + 22.08, abs=0.1)
    # Equirectangular shows every latitude, so the moon is always placed
    assert frame.moon_pixel is not None


def test_bodies_off_canvas_are_none(jan10_noon):
    config = RenderConfig(width=1000, height=100, projection=Projection.MERCATOR, fixed_instant=jan10_noon)
    frame = render(config=config)
    # A wide, short Mercator canvas only shows about ±18°
    assert frame.sun_pixel is None


def test_phase_matches_moon(small_config):
    frame = render(config=small_config)
    assert isinstance(frame.phase, MoonPhase)
    assert frame.moon_glyph.radius == small_config.moon_radius
    assert 0 <= frame.illuminated_percent <= 100


def test_no_observer_no_panel(small_config):
    frame = render(config=small_config)
    assert frame.observer is None
    assert "sunrise" not in frame.summary()


def test_observer_panel(small_config):
    frame = render(observer=GeoPoint(lat=48.85, lng=2.35), config=small_config)
    info = frame.observer
    assert info is not None
    assert info.band is TwilightBand.DAY
    assert info.solar_elevation > 0
    assert info.sun_times.sunrise < frame.instant < info.sun_times.sunset
    summary = frame.summary()
    assert summary["sunrise"] and summary["sunset"]
    assert summary["polar_night"] is False


def test_polar_observer_yields_sentinel(small_config):
    frame = render(observer=GeoPoint(lat=85.0, lng=0.0), config=small_config)
    assert frame.observer.sun_times.polar_night
    summary = frame.summary()
    assert summary["polar_night"] is True
    assert summary["sunrise"] is None
    assert summary["day_length"] == "0:00:00"


def test_render_is_repeatable_with_fresh_buffers(small_config):
    a = render(config=small_config)
    b = render(config=small_config)
    assert a.overlay is not b.overlay
    assert np.array_equal(a.overlay, b.overlay)


def test_profile_threads_through(small_config):
    gray = render(config=dataclasses.replace(small_config, profile=GRAYSCALE_PROFILE))
    assert gray.moon_glyph.shadow_rgb == GRAYSCALE_PROFILE.moon_shadow_rgb
    assert set(np.unique(gray.overlay[..., 3])) <= {0, 63, 178}


def test_terminator_only_when_requested(small_config):
    assert render(config=small_config).terminator == ()
    frame = render(config=dataclasses.replace(small_config, draw_terminator=True))
    assert len(frame.terminator) > 100
