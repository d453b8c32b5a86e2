import numpy as np
import pytest

from daynightmap.models import Projection
from daynightmap.projection import MERCATOR_MAX_LAT, ProjectionMapper


@pytest.fixture(params=list(Projection))
def mapper(request) -> ProjectionMapper:
    return ProjectionMapper(request.param, 1000, 500)


def _lat_limit(mapper: ProjectionMapper) -> float:
    return MERCATOR_MAX_LAT if mapper.projection is Projection.MERCATOR else 90.0


def test_geo_round_trip(mapper):
    rng = np.random.default_rng(1222)
    limit = _lat_limit(mapper)
    lat = rng.uniform(-limit, limit, 1000)
    lng = rng.uniform(-179.999, 180.0, 1000)
    x, y = mapper.geo_to_pixel(lat, lng)
    lat2, lng2 = mapper.pixel_to_geo(x, y)
    np.testing.assert_allclose(lat2, lat, atol=1e-6)
    np.testing.assert_allclose(lng2, lng, atol=1e-6)


def test_pixel_round_trip(mapper):
    rng = np.random.default_rng(7)
    x = rng.uniform(0, mapper.width, 1000)
    y = rng.uniform(0, mapper.height, 1000)
    lat, lng = mapper.pixel_to_geo(x, y)
    x2, y2 = mapper.geo_to_pixel(lat, lng)
    np.testing.assert_allclose(x2, x, atol=1e-6)
    np.testing.assert_allclose(y2, y, atol=1e-6)


def test_longitude_is_linear(mapper):
    assert mapper.geo_to_pixel(0.0, -180.0)[0] == pytest.approx(0.0)
    assert mapper.geo_to_pixel(0.0, 0.0)[0] == pytest.approx(500.0)
    assert mapper.geo_to_pixel(0.0, 180.0)[0] == pytest.approx(1000.0)


def test_equator_at_vertical_centre(mapper):
    assert mapper.geo_to_pixel(0.0, 0.0)[1] == pytest.approx(250.0)


def test_equirectangular_full_range():
    m = ProjectionMapper(Projection.EQUIRECTANGULAR, 1000, 500)
    assert m.geo_to_pixel(90.0, 0.0)[1] == pytest.approx(0.0)
    assert m.geo_to_pixel(-90.0, 0.0)[1] == pytest.approx(500.0)
    assert m.valid_latitude(90.0)
    assert m.valid_latitude(-90.0)


def test_mercator_domain():
    m = ProjectionMapper(Projection.MERCATOR, 1000, 500)
    assert m.valid_latitude(85.0)
    assert not m.valid_latitude(85.5)
    assert not m.valid_latitude(-89.0)
    # y grows downward: northern latitudes sit above the equator
    assert m.geo_to_pixel(30.0, 0.0)[1] < 250.0


def test_scalar_in_scalar_out(mapper):
    x, y = mapper.geo_to_pixel(12.5, 40.0)
    assert isinstance(x, float) and isinstance(y, float)
    assert isinstance(mapper.valid_latitude(12.5), bool)


def test_off_canvas_is_not_visible():
    m = ProjectionMapper(Projection.MERCATOR, 1000, 500)
    # 80°N is inside the Mercator domain but above the top edge of a 2:1 canvas
    assert m.valid_latitude(80.0)
    assert m.project_visible(80.0, 0.0) is None
    assert m.project_visible(86.0, 0.0) is None
    assert m.project_visible(10.0, 20.0) is not None
    assert not m.is_visible(10.0, -1.0)
    assert m.is_visible(0.0, 500.0)


def test_inverse_longitude_stays_in_range(mapper):
    _, lng = mapper.pixel_to_geo(0.0, 250.0)
    assert lng == pytest.approx(180.0)
    _, lngs = mapper.pixel_to_geo(np.linspace(0, mapper.width, 101), np.full(101, 250.0))
    assert np.all(lngs > -180.0) and np.all(lngs <= 180.0)
