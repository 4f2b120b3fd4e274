import sys
from pathlib import Path

import pytest

# run from a checkout without installing
_SRC = Path(__file__).parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from mapserver.tms.geometry import BoundingBox, PixelRange
from mapserver.tms.transform import MapUnitToPixelTransform


@pytest.fixture
def unit_extent():
    """100 x 100 map units anchored at the origin."""
    return BoundingBox(0.0, 0.0, 100.0, 100.0)


@pytest.fixture
def unit_transform(unit_extent):
    """One map unit per pixel over a 100 x 100 image."""
    return MapUnitToPixelTransform.from_extent_and_range(unit_extent, PixelRange(0, 0, 100, 100))


@pytest.fixture
def offset_transform():
    """Extent (10, 20, 50, 40) on a 20 x 10 grid whose origin is pixel (5, 7)."""
    return MapUnitToPixelTransform.from_extent_and_range(
        BoundingBox(10.0, 20.0, 50.0, 40.0), PixelRange(5, 7, 20, 10))
