import numpy as np

from mapserver.tms.geometry import BoundingBox, Pixel, PixelRange, Point
from mapserver.tms.transform import MapUnitToPixelTransform


def test_to_pixels_resolves_corners(unit_transform):
    xs = np.array([0.0, 100.0, 0.0, 100.0, 50.0])
    ys = np.array([100.0, 100.0, 0.0, 0.0, 50.0])
    px, py = unit_transform.to_pixels(xs, ys)
    assert np.array_equal(px, np.array([0, 99, 0, 99, 50]))
    assert np.array_equal(py, np.array([0, 0, 99, 99, 50]))


def test_to_pixels_matches_scalar(offset_transform):
    rng = np.random.default_rng(42)
    # whole map units land on pixel boundaries (scale 2), halves inside pixels
    xs = rng.integers(0, 120, 300) / 2.0
    ys = rng.integers(20, 100, 300) / 2.0
    ext = offset_transform.extent
    xs = np.concatenate([xs, [ext.min_x, ext.max_x, ext.min_x, ext.max_x]])
    ys = np.concatenate([ys, [ext.max_y, ext.max_y, ext.min_y, ext.min_y]])
    px, py = offset_transform.to_pixels(xs, ys)
    for x, y, cx, cy in zip(xs, ys, px, py):
        assert offset_transform.to_pixel(Point(x, y)) == Pixel(cx, cy)


def test_to_pixels_explicit_flags(unit_transform):
    px, py = unit_transform.to_pixels([30.0, 30.0], [60.0, 60.0], True, False)
    assert np.array_equal(px, [29, 29])
    assert np.array_equal(py, [40, 40])


def test_to_pixels_flag_arrays(unit_transform):
    px, py = unit_transform.to_pixels([30.0, 30.0], [60.0, 60.0],
                                      np.array([True, False]), np.array([False, True]))
    assert np.array_equal(px, [29, 30])
    assert np.array_equal(py, [40, 39])


def test_to_pixels_single_flag_treats_other_as_exclusive(unit_transform):
    # a corner with only one flag given no longer uses the corner table
    px, py = unit_transform.to_pixels([100.0], [0.0], lower_inclusive=True)
    assert np.array_equal(px, [100])
    assert np.array_equal(py, [99])


def test_to_points_matches_scalar(offset_transform):
    cols = np.arange(5, 25)
    rows = np.arange(7, 27)
    xs, ys = offset_transform.to_points(cols, rows)
    for c, r, x, y in zip(cols, rows, xs, ys):
        assert offset_transform.to_point(Pixel(c, r)) == Point(x, y)


def test_vector_round_trip(unit_transform):
    cols, rows = np.meshgrid(np.arange(100), np.arange(100))
    xs, ys = unit_transform.to_points(cols, rows)
    px, py = unit_transform.to_pixels(xs, ys)
    assert np.array_equal(px, cols)
    assert np.array_equal(py, rows)


def test_vector_round_trip_web_mercator():
    half = 20037508.342789244
    t = MapUnitToPixelTransform.from_extent_and_range(BoundingBox(-half, -half, half, half), PixelRange(0, 0, 777, 333))
    cols, rows = np.meshgrid(np.arange(777), np.arange(333))
    px, py = t.to_pixels(*t.to_points(cols, rows))
    assert np.array_equal(px, cols)
    assert np.array_equal(py, rows)
