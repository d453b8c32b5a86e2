import numpy as np
import pytest

from daynightmap.models import BandStop, GeoPoint, Profile, ProfileKind, Projection, TwilightBand
from daynightmap.projection import ProjectionMapper
from daynightmap.twilight import (
    COLOR_PROFILE,
    GRAYSCALE_PROFILE,
    band_opacity,
    classify,
    shade,
    solar_elevation,
    solar_elevation_grid,
    terminator_points,
)


@pytest.mark.parametrize("lat, lng", [(0.0, 0.0), (-23.3, 0.0), (45.0, -120.5), (89.0, 180.0), (-60.0, 33.0)])
def test_elevation_at_subsolar_point_is_zenith(lat, lng):
    point = GeoPoint(lat=lat, lng=lng)
    assert solar_elevation(point, point) == pytest.approx(90.0)


def test_elevation_at_antipode_is_nadir():
    sun = GeoPoint(lat=20.0, lng=10.0)
    assert solar_elevation(GeoPoint(lat=-20.0, lng=-170.0), sun) == pytest.approx(-90.0)


def test_elevation_on_great_circle():
    sun = GeoPoint(lat=0.0, lng=0.0)
    assert solar_elevation(GeoPoint(lat=0.0, lng=90.0), sun) == pytest.approx(0.0, abs=1e-9)
    assert solar_elevation(GeoPoint(lat=30.0, lng=0.0), sun) == pytest.approx(60.0)


def test_elevation_grid_matches_scalar():
    sun = GeoPoint(lat=-15.0, lng=40.0)
    lat = np.array([[10.0, -30.0], [60.0, 0.0]])
    lng = np.array([[170.0, -20.0], [40.0, 100.0]])
    grid = solar_elevation_grid(lat, lng, sun)
    assert grid.shape == (2, 2)
    for i in range(2):
        for j in range(2):
            expected = solar_elevation(GeoPoint(lat=lat[i, j], lng=lng[i, j]), sun)
            assert grid[i, j] == pytest.approx(expected)


@pytest.mark.parametrize(
    "elevation, band",
    [
        (10.0, TwilightBand.DAY),
        (0.0, TwilightBand.DAY),
        (-0.5, TwilightBand.CIVIL),
        (-1.0, TwilightBand.CIVIL),
        (-3.0, TwilightBand.NAUTICAL),
        (-6.0, TwilightBand.NAUTICAL),
        (-8.0, TwilightBand.ASTRONOMICAL),
        (-12.0, TwilightBand.ASTRONOMICAL),
        (-20.0, TwilightBand.NIGHT),
        (-90.0, TwilightBand.NIGHT),
    ],
)
def test_classify_color(elevation, band):
    assert classify(elevation, COLOR_PROFILE) is band


@pytest.mark.parametrize(
    "elevation, band",
    [(1.0, TwilightBand.DAY), (-3.0, TwilightBand.CIVIL), (-6.0, TwilightBand.CIVIL), (-7.0, TwilightBand.NIGHT)],
)
def test_classify_grayscale_uses_fewer_bands(elevation, band):
    assert classify(elevation, GRAYSCALE_PROFILE) is band


@pytest.mark.parametrize(
    "elevation, alpha",
    [(10.0, 0.0), (0.0, 0.0), (-0.5, 0.1), (-1.0, 0.2), (-3.5, 0.4), (-6.0, 0.6), (-9.0, 0.7), (-12.0, 0.8), (-50.0, 0.8)],
)
def test_color_opacity_is_smooth(elevation, alpha):
    assert band_opacity(elevation, COLOR_PROFILE) == pytest.approx(alpha)


@pytest.mark.parametrize("elevation, alpha", [(5.0, 0.0), (-0.1, 0.25), (-3.0, 0.25), (-6.5, 0.70), (-40.0, 0.70)])
def test_grayscale_opacity_is_stepped(elevation, alpha):
    assert band_opacity(elevation, GRAYSCALE_PROFILE) == pytest.approx(alpha)


@pytest.mark.parametrize("profile", [COLOR_PROFILE, GRAYSCALE_PROFILE])
def test_opacity_non_increasing_with_elevation(profile):
    elevation = np.linspace(-90.0, 90.0, 3601)
    alpha = band_opacity(elevation, profile)
    assert alpha.shape == elevation.shape
    assert np.all(np.diff(alpha) <= 1e-12)


def test_custom_table_is_honoured():
    profile = Profile(
        kind=ProfileKind.COLOR,
        table=(
            BandStop(TwilightBand.DAY, 0.0, 0.0),
            BandStop(TwilightBand.NIGHT, -90.0, 0.5),
        ),
        smooth=False,
        overlay_rgb=(10, 20, 30),
        alpha_scale=1.0,
        moon_lit_rgb=(255, 255, 255),
        moon_shadow_rgb=(0, 0, 0),
        sun_rgb=(255, 255, 0),
    )
    assert band_opacity(-1.0, profile) == pytest.approx(0.5)
    assert classify(-1.0, profile) is TwilightBand.NIGHT
    sample = shade(-1.0, profile)
    assert sample.color == (10, 20, 30)
    assert sample.alpha == pytest.approx(0.5)


def test_profile_rejects_increasing_opacity():
    with pytest.raises(ValueError):
        Profile(
            kind=ProfileKind.COLOR,
            table=(BandStop(TwilightBand.DAY, 0.0, 0.5), BandStop(TwilightBand.NIGHT, -90.0, 0.1)),
            smooth=True,
            overlay_rgb=(0, 0, 0),
            alpha_scale=1.0,
            moon_lit_rgb=(255, 255, 255),
            moon_shadow_rgb=(0, 0, 0),
            sun_rgb=(255, 255, 0),
        )


def test_profile_rejects_unordered_floors():
    with pytest.raises(ValueError):
        Profile(
            kind=ProfileKind.GRAYSCALE,
            table=(BandStop(TwilightBand.NIGHT, -90.0, 0.7), BandStop(TwilightBand.DAY, 0.0, 0.0)),
            smooth=False,
            overlay_rgb=(0, 0, 0),
            alpha_scale=1.0,
            moon_lit_rgb=(255, 255, 255),
            moon_shadow_rgb=(0, 0, 0),
            sun_rgb=(255, 255, 255),
        )


def test_terminator_points_have_zero_elevation():
    sun = GeoPoint(lat=-20.0, lng=30.0)
    mapper = ProjectionMapper(Projection.EQUIRECTANGULAR, 720, 360)
    points = terminator_points(sun, mapper)
    assert len(points) == 181
    for x, y in points:
        lat, lng = mapper.pixel_to_geo(x, y)
        assert solar_elevation(GeoPoint(lat=lat, lng=lng), sun) == pytest.approx(0.0, abs=1e-6)


def test_terminator_at_equinox_stays_finite():
    points = terminator_points(GeoPoint(lat=0.0, lng=0.0), ProjectionMapper(Projection.EQUIRECTANGULAR, 360, 180))
    assert points
    assert all(np.isfinite(x) and np.isfinite(y) for x, y in points)


def test_terminator_drops_points_outside_mercator():
    mapper = ProjectionMapper(Projection.MERCATOR, 1000, 500)
    points = terminator_points(GeoPoint(lat=-23.0, lng=0.0), mapper)
    assert all(0 <= y <= 500 for _, y in points)
    assert len(points) < 181
