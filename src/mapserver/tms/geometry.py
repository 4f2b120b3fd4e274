"""
geometry.py

Immutable value types shared by the transform and the WMS layer:
coordinates in map units (`Point`), integer image coordinates (`Pixel`),
and the rectangles built from them (`BoundingBox`, `PixelRange`).

Pixel coordinates have their origin in the upper-left corner with y
increasing downward; map units have y increasing upward.

Public names:
- `Point`, `Pixel`, `BoundingBox`, `PixelRange`
- `InvalidGeometry` : raised when a rectangle is constructed with invalid bounds

"""
from dataclasses import dataclass
import math


class InvalidGeometry(ValueError):
    """A bounding box, pixel range or scale violates its invariants."""


@dataclass(frozen=True)
class Point:
    """A coordinate in map units. Both values must be finite."""
    x: float
    y: float

    def __post_init__(self):
        x, y = float(self.x), float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidGeometry(f'point coordinates must be finite: ({x}, {y})')
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)


@dataclass(frozen=True)
class Pixel:
    """An integer image coordinate (column x, row y)."""
    x: int
    y: int

    def __post_init__(self):
        object.__setattr__(self, 'x', int(self.x))
        object.__setattr__(self, 'y', int(self.y))


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned rectangle in map units.

    Zero width or height is allowed here; a transform rejects it later
    because it cannot derive a positive scale from it.
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self):
        coords = [float(v) for v in (self.min_x, self.min_y, self.max_x, self.max_y)]
        if not all(math.isfinite(v) for v in coords):
            raise InvalidGeometry(f'bounding box coordinates must be finite: {coords}')
        min_x, min_y, max_x, max_y = coords
        if max_x < min_x:
            raise InvalidGeometry(f'max_x ({max_x}) < min_x ({min_x})')
        if max_y < min_y:
            raise InvalidGeometry(f'max_y ({max_y}) < min_y ({min_y})')
        for name, value in zip(('min_x', 'min_y', 'max_x', 'max_y'), coords):
            object.__setattr__(self, name, value)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def upper_left(self) -> Point:
        return Point(self.min_x, self.max_y)

    def upper_right(self) -> Point:
        return Point(self.max_x, self.max_y)

    def lower_left(self) -> Point:
        return Point(self.min_x, self.min_y)

    def lower_right(self) -> Point:
        return Point(self.max_x, self.min_y)

    def contains(self, point: Point) -> bool:
        """True if `point` lies inside or on the border of this box."""
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y

    def intersects(self, other: 'BoundingBox') -> bool:
        """True if the two boxes share an area (touching borders do not count)."""
        return (self.min_x < other.max_x and other.min_x < self.max_x
                and self.min_y < other.max_y and other.min_y < self.max_y)

    def intersection(self, other: 'BoundingBox') -> 'BoundingBox':
        """The shared area of two intersecting boxes."""
        if not self.intersects(other):
            raise InvalidGeometry(f'{self} and {other} do not overlap')
        return BoundingBox(max(self.min_x, other.min_x), max(self.min_y, other.min_y),
                           min(self.max_x, other.max_x), min(self.max_y, other.max_y))


@dataclass(frozen=True)
class PixelRange:
    """An integer rectangle of pixels: origin (min_x, min_y) plus width and height.

    `max_x` and `max_y` are the last addressable column and row, so a range
    of width 1 has min_x == max_x.
    """
    min_x: int
    min_y: int
    width: int
    height: int

    def __post_init__(self):
        for name in ('min_x', 'min_y', 'width', 'height'):
            object.__setattr__(self, name, int(getattr(self, name)))
        if self.width < 1 or self.height < 1:
            raise InvalidGeometry(
                f'pixel range needs width and height >= 1, got {self.width}x{self.height}')

    @property
    def max_x(self) -> int:
        return self.min_x + self.width - 1

    @property
    def max_y(self) -> int:
        return self.min_y + self.height - 1

    def contains(self, pixel: Pixel) -> bool:
        return self.min_x <= pixel.x <= self.max_x and self.min_y <= pixel.y <= self.max_y
