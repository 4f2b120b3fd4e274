"""
service.py

GetMap handling on top of a georeferenced base raster.

`MapService` owns one image together with the extent it covers. For each
request it locates the requested extent in the image with a
`MapUnitToPixelTransform`, crops the part that overlaps the image, scales
it to where that overlap falls in the requested WIDTH x HEIGHT and fills
the rest with the configured background. Encoding the result is left to
the caller.

"""
from typing import Mapping
import logging

from PIL import Image

from mapserver.config import WMS
from mapserver.tms.geometry import BoundingBox, PixelRange
from mapserver.tms.transform import MapUnitToPixelTransform
from mapserver.wms.request import GetMapRequest, ServiceException
from mapserver.wms.utils import safe_log_exception, setup_logging

logger = logging.getLogger(__name__)
setup_logging()


class MapService:
    """Serve GetMap requests from a single base raster.

    Parameters
    - image: `PIL.Image.Image` holding the base raster
    - extent: `BoundingBox` in map units covered by the whole image
    """

    def __init__(self, image: Image.Image, extent: BoundingBox):
        self.image = image.convert('RGBA')
        self.extent = extent
        self.transform = MapUnitToPixelTransform.from_extent_and_range(
            extent, PixelRange(0, 0, image.width, image.height))
        self.resample = getattr(Image.Resampling, WMS['resample'].upper())

    def handle(self, params: Mapping[str, str]) -> Image.Image:
        """Answer a GetMap request given as raw parameters.

        Raises `ServiceException` after logging it.
        """
        logger.info('Request: %s', '&'.join(f'{k}={v}' for k, v in params.items()))
        try:
            request = GetMapRequest.adapt(params)
        except ServiceException as se:
            if se.codes:
                logger.warning('%s: %s', se.codes, se)
            else:
                safe_log_exception('GetMap request rejected', se)
            raise
        return self.render(request)

    def crop(self, bbox: BoundingBox) -> Image.Image:
        """Pixels of the base raster covering `bbox`, padded with the background."""
        region = self.transform.to_pixel_range(bbox)
        canvas = Image.new('RGBA', (region.width, region.height), WMS['background'])
        x0 = max(region.min_x, 0)
        y0 = max(region.min_y, 0)
        x1 = min(region.max_x + 1, self.image.width)
        y1 = min(region.max_y + 1, self.image.height)
        if x0 < x1 and y0 < y1:
            canvas.paste(self.image.crop((x0, y0, x1, y1)), (x0 - region.min_x, y0 - region.min_y))
        return canvas

    def render(self, request: GetMapRequest) -> Image.Image:
        """Draw the part of the base raster inside the request extent onto a WIDTH x HEIGHT canvas.

        Only the overlap of the two extents is cropped from the base raster,
        so memory stays bounded by the base raster and the requested size.
        """
        canvas = Image.new('RGBA', (request.pixel_range.width, request.pixel_range.height), WMS['background'])
        if not request.extent.intersects(self.extent):
            logger.debug('request extent %s outside base raster %s', request.extent, self.extent)
            return canvas
        overlap = request.extent.intersection(self.extent)
        target = request.transform().to_pixel_range(overlap)
        patch = self.crop(overlap).resize((target.width, target.height), self.resample)
        canvas.paste(patch, (target.min_x, target.min_y))
        return canvas
