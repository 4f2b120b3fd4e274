"""
transform.py

Mapping between map units and the pixel grid of an output image.

A `MapUnitToPixelTransform` binds a `BoundingBox` (the extent) to a
`PixelRange` so that the upper-left corner of the extent lands on the
upper-left corner of pixel (range.min_x, range.min_y) and the lower-right
corner of the extent on the lower-right corner of pixel (range.max_x, range.max_y).

Public API:
- `MapUnitToPixelTransform.from_extent_and_range(extent, pixel_range)`
- `MapUnitToPixelTransform.from_extent_and_scale(extent, scale, origin_x=0, origin_y=0)`
- `to_point(pixel)`, `to_pixel(point[, left_inclusive, lower_inclusive])`, `to_pixel_range(bbox)`
- `to_points(xs, ys)`, `to_pixels(xs, ys, ...)` : numpy-vectorized versions
- `as_affine()` : equivalent `affine.Affine` (pixel -> map units)

Boundary rule: a point on a grid line belongs to the pixel right of / below
the line unless the matching inclusive flag is set, in which case it
belongs to the pixel left of / above it.

"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import math

import numpy as np
from affine import Affine

from mapserver.config import TRANSFORM
from mapserver.tms.geometry import BoundingBox, InvalidGeometry, Pixel, PixelRange, Point

logger = logging.getLogger(__name__)


# continuous pixel coordinates this close to a grid line are on it
_SNAP_REL_TOL = 1e-12
_SNAP_ABS_TOL = 1e-9


def _resolve_index(value: float, inclusive: bool) -> int:
    nearest = round(value)
    if math.isclose(value, nearest, rel_tol=_SNAP_REL_TOL, abs_tol=_SNAP_ABS_TOL):
        value = nearest
    floored = math.floor(value)
    if inclusive and value == floored:
        return floored - 1
    return floored


def _resolve_indices(values: np.ndarray, inclusive: np.ndarray) -> np.ndarray:
    nearest = np.round(values)
    values = np.where(np.isclose(values, nearest, rtol=_SNAP_REL_TOL, atol=_SNAP_ABS_TOL), nearest, values)
    floored = np.floor(values)
    return np.where(inclusive & (values == floored), floored - 1, floored).astype(int)


@dataclass(frozen=True)
class MapUnitToPixelTransform:
    """Transforms between coordinates in map units and pixel coordinates.

    Prefer the `from_extent_and_range` / `from_extent_and_scale` constructors;
    the plain constructor takes the scales as given (map units per pixel).
    Instances are immutable and safe to share between threads.
    """
    extent: BoundingBox
    pixel_range: PixelRange
    scale_x: float
    scale_y: float
    _corner_flags: Dict[Point, Tuple[bool, bool]] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ('scale_x', 'scale_y'):
            value = float(getattr(self, name))
            if not (math.isfinite(value) and value > 0):
                raise InvalidGeometry(f'{name} must be a positive number of map units per pixel, got {value}')
            object.__setattr__(self, name, value)
        ext = self.extent
        # corner -> (left_inclusive, lower_inclusive) for to_pixel(point);
        # on a degenerate extent earlier entries win
        corners = [
            (ext.upper_right(), (True, False)),
            (ext.upper_left(), (False, False)),
            (ext.lower_left(), (False, True)),
            (ext.lower_right(), (True, True)),
        ]
        object.__setattr__(self, '_corner_flags', dict(reversed(corners)))

    # ------------------------------------------------------------------ constructors
    @classmethod
    def from_extent_and_range(cls, extent: BoundingBox, pixel_range: PixelRange) -> 'MapUnitToPixelTransform':
        """Bind `extent` to `pixel_range`; the scales follow from their sizes."""
        if extent.width <= 0 or extent.height <= 0:
            raise InvalidGeometry(f'extent must have a positive width and height: {extent}')
        transform = cls(extent, pixel_range,
                        extent.width / pixel_range.width,
                        extent.height / pixel_range.height)
        logger.debug('transform %s -> %s (scale %g x %g)', extent, pixel_range,
                     transform.scale_x, transform.scale_y)
        return transform

    @classmethod
    def from_extent_and_scale(cls, extent: BoundingBox, scale: float,
                              origin_x: Optional[int] = None,
                              origin_y: Optional[int] = None) -> 'MapUnitToPixelTransform':
        """Bind `extent` to a pixel grid of uniform `scale` (map units per pixel).

        The grid is sized with ceil() so it always covers the whole extent;
        the last column/row may reach past the extent by a fraction of a pixel.
        The origin defaults to TRANSFORM['default_origin'].
        """
        scale = float(scale)
        if not (math.isfinite(scale) and scale > 0):
            raise InvalidGeometry(f'scale must be positive, got {scale}')
        if extent.width <= 0 or extent.height <= 0:
            raise InvalidGeometry(f'extent must have a positive width and height: {extent}')
        columns = extent.width / scale
        rows = extent.height / scale
        if not (math.isfinite(columns) and math.isfinite(rows)):
            raise InvalidGeometry(f'scale {scale} is too small for extent {extent}')
        default_x, default_y = TRANSFORM['default_origin']
        pixel_range = PixelRange(
            default_x if origin_x is None else origin_x,
            default_y if origin_y is None else origin_y,
            math.ceil(columns),
            math.ceil(rows),
        )
        logger.debug('transform %s at scale %g -> %s', extent, scale, pixel_range)
        return cls(extent, pixel_range, scale, scale)

    # ------------------------------------------------------------------ scalar mapping
    def to_point(self, pixel: Pixel) -> Point:
        """Map a pixel to the point at its upper-left corner."""
        x = self.extent.min_x + self.scale_x * (pixel.x - self.pixel_range.min_x)
        y = self.extent.max_y - self.scale_y * (pixel.y - self.pixel_range.min_y)
        return Point(x, y)

    def to_pixel(self, point: Point, left_inclusive: Optional[bool] = None,
                 lower_inclusive: Optional[bool] = None) -> Pixel:
        """Map a point to the pixel that contains it.

        Without flags, a point on a pixel boundary goes to the pixel right of
        and/or below the boundary, except for the four corners of the extent,
        which are resolved so the extent covers exactly the pixel range.

        left_inclusive: a point on the left border of a pixel belongs to the pixel on the left
        lower_inclusive: a point on the lower border of a pixel belongs to the pixel above
        """
        if left_inclusive is None and lower_inclusive is None:
            left_inclusive, lower_inclusive = self._corner_flags.get(point, (False, False))
        x_offset = point.x - self.extent.min_x
        y_offset = self.extent.max_y - point.y
        x = self.pixel_range.min_x + x_offset / self.scale_x
        y = self.pixel_range.min_y + y_offset / self.scale_y
        return Pixel(_resolve_index(x, bool(left_inclusive)),
                     _resolve_index(y, bool(lower_inclusive)))

    def to_pixel_range(self, bbox: BoundingBox) -> PixelRange:
        """Smallest pixel range that covers `bbox`.

        A box with zero width or height (or one thinner than a pixel lying on
        a grid line) still covers the single row/column its upper-left corner
        falls in, so the result is never empty.
        """
        ul = self.to_pixel(bbox.upper_left(), False, False)
        lr = self.to_pixel(bbox.lower_right(), True, True)
        return PixelRange(ul.x, ul.y, max(lr.x - ul.x, 0) + 1, max(lr.y - ul.y, 0) + 1)

    # ------------------------------------------------------------------ vectorized mapping
    def to_points(self, xs, ys) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized `to_point`: pixel columns/rows -> map-unit x, y arrays."""
        px = np.asarray(xs, dtype=float)
        py = np.asarray(ys, dtype=float)
        mx = self.extent.min_x + self.scale_x * (px - self.pixel_range.min_x)
        my = self.extent.max_y - self.scale_y * (py - self.pixel_range.min_y)
        return mx, my

    def to_pixels(self, xs, ys, left_inclusive=None, lower_inclusive=None) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized `to_pixel`: map-unit x, y arrays -> integer pixel columns/rows.

        With both flags None the extent corners are resolved element-wise as
        in `to_pixel(point)`. Otherwise the flags (scalars or boolean arrays)
        are broadcast against the coordinates; a None flag counts as False.
        """
        mx, my = np.broadcast_arrays(np.asarray(xs, dtype=float), np.asarray(ys, dtype=float))
        if left_inclusive is None and lower_inclusive is None:
            left = np.zeros(mx.shape, dtype=bool)
            lower = np.zeros(mx.shape, dtype=bool)
            for corner, (corner_left, corner_lower) in self._corner_flags.items():
                hit = (mx == corner.x) & (my == corner.y)
                left[hit] = corner_left
                lower[hit] = corner_lower
        else:
            left = np.broadcast_to(np.asarray(False if left_inclusive is None else left_inclusive, dtype=bool), mx.shape)
            lower = np.broadcast_to(np.asarray(False if lower_inclusive is None else lower_inclusive, dtype=bool), mx.shape)
        fx = self.pixel_range.min_x + (mx - self.extent.min_x) / self.scale_x
        fy = self.pixel_range.min_y + (self.extent.max_y - my) / self.scale_y
        return _resolve_indices(fx, left), _resolve_indices(fy, lower)

    def as_affine(self) -> Affine:
        """The affine matrix taking (column, row) to map units, same as `to_point`."""
        return Affine(self.scale_x, 0.0, self.extent.min_x - self.scale_x * self.pixel_range.min_x,
                      0.0, -self.scale_y, self.extent.max_y + self.scale_y * self.pixel_range.min_y)
