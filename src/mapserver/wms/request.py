"""WMS GetMap request adaptation.

Turns the raw key/value parameters of a GetMap request into the extent
and pixel range the transform works with. Parameter names are matched
case-insensitively; values are kept as given apart from the numeric ones.
Anything the transform core rejects comes back as a `ServiceException`
so the protocol layer has a single error type to report.
"""
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from mapserver.config import WMS
from mapserver.tms.geometry import BoundingBox, InvalidGeometry, PixelRange
from mapserver.tms.transform import MapUnitToPixelTransform

MISSING_PARAMETER_VALUE = 'MissingParameterValue'
INVALID_PARAMETER_VALUE = 'InvalidParameterValue'
INVALID_FORMAT = 'InvalidFormat'


class ServiceException(Exception):
    """A request the service cannot answer, with its OGC exception codes (possibly none)."""

    def __init__(self, message: str, codes: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.codes: List[str] = list(codes or [])


def _required(params: Mapping[str, str], name: str) -> str:
    value = params.get(name)
    if value is None or not str(value).strip():
        raise ServiceException(f'missing parameter {name}', [MISSING_PARAMETER_VALUE])
    return str(value).strip()


def _image_size(params: Mapping[str, str], name: str, limit: int) -> int:
    raw = _required(params, name)
    try:
        size = int(raw)
    except ValueError:
        raise ServiceException(f'{name} must be an integer, got {raw!r}', [INVALID_PARAMETER_VALUE]) from None
    if size < 1 or size > limit:
        raise ServiceException(f'{name} must be between 1 and {limit}, got {size}', [INVALID_PARAMETER_VALUE])
    return size


def parse_bbox(raw: str) -> BoundingBox:
    """Parse a "minx,miny,maxx,maxy" BBOX value.

    Raises `ServiceException` for malformed text and `InvalidGeometry` for
    well-formed numbers that do not describe a box.
    """
    parts = [p.strip() for p in raw.split(',')]
    if len(parts) != 4:
        raise ServiceException(f'BBOX needs 4 comma-separated values, got {raw!r}', [INVALID_PARAMETER_VALUE])
    try:
        min_x, min_y, max_x, max_y = (float(p) for p in parts)
    except ValueError:
        raise ServiceException(f'BBOX values must be numbers, got {raw!r}', [INVALID_PARAMETER_VALUE]) from None
    return BoundingBox(min_x, min_y, max_x, max_y)


@dataclass(frozen=True)
class GetMapRequest:
    extent: BoundingBox
    pixel_range: PixelRange
    format: str
    version: Optional[str] = None
    layers: Tuple[str, ...] = ()
    srs: Optional[str] = None
    map_transform: Optional[MapUnitToPixelTransform] = field(default=None, compare=False, repr=False)

    @classmethod
    def adapt(cls, params: Mapping[str, str]) -> 'GetMapRequest':
        """Build a request from raw parameters; raises `ServiceException`."""
        p = {str(k).upper(): v for k, v in params.items()}

        version = p.get('VERSION')
        if version is not None and version not in WMS['versions']:
            raise ServiceException(f'unsupported VERSION {version!r}', [INVALID_PARAMETER_VALUE])

        fmt = p.get('FORMAT') or WMS['formats'][0]
        if fmt not in WMS['formats']:
            raise ServiceException(f'unsupported FORMAT {fmt!r}', [INVALID_FORMAT])

        width = _image_size(p, 'WIDTH', WMS['max_width'])
        height = _image_size(p, 'HEIGHT', WMS['max_height'])
        pixel_range = PixelRange(0, 0, width, height)
        try:
            extent = parse_bbox(_required(p, 'BBOX'))
            # a zero-area box cannot be bound to any image
            map_transform = MapUnitToPixelTransform.from_extent_and_range(extent, pixel_range)
        except InvalidGeometry as e:
            raise ServiceException(f'invalid BBOX: {e}') from e

        layers = tuple(name for name in (p.get('LAYERS') or '').split(',') if name)
        return cls(extent=extent,
                   pixel_range=pixel_range,
                   format=fmt,
                   version=version,
                   layers=layers,
                   srs=p.get('CRS') or p.get('SRS'),
                   map_transform=map_transform)

    @property
    def response_content_type(self) -> str:
        return self.format

    def transform(self) -> MapUnitToPixelTransform:
        """Transform binding the requested extent to the requested image size."""
        if self.map_transform is not None:
            return self.map_transform
        return MapUnitToPixelTransform.from_extent_and_range(self.extent, self.pixel_range)
