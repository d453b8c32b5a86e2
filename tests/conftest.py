from datetime import datetime

import pytest
from pytz import utc

from daynightmap.config import RenderConfig
from daynightmap.models import Projection


@pytest.fixture
def jan10_noon() -> datetime:
    return datetime(2024, 1, 10, 12, 0, tzinfo=utc)


@pytest.fixture
def small_config(jan10_noon: datetime) -> RenderConfig:
    """1 px per degree, every latitude projectable."""
    return RenderConfig(
        width=360,
        height=180,
        projection=Projection.EQUIRECTANGULAR,
        stride=2,
        fixed_instant=jan10_noon,
    )
