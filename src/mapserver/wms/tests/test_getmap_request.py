import pytest

from mapserver.tms.geometry import BoundingBox, InvalidGeometry, PixelRange
from mapserver.wms.request import GetMapRequest, ServiceException, parse_bbox


def make_params(**overrides):
    params = {'BBOX': '0,0,100,50', 'WIDTH': '200', 'HEIGHT': '100'}
    params.update(overrides)
    return params


def test_adapt_basic():
    req = GetMapRequest.adapt({
        'bbox': '0,0,100,50', 'width': '200', 'height': '100',
        'format': 'image/jpeg', 'version': '1.1.1', 'layers': 'roads,water', 'srs': 'EPSG:3857',
    })
    assert req.extent == BoundingBox(0, 0, 100, 50)
    assert req.pixel_range == PixelRange(0, 0, 200, 100)
    assert req.response_content_type == 'image/jpeg'
    assert req.layers == ('roads', 'water')
    assert req.srs == 'EPSG:3857'


def test_adapt_defaults():
    req = GetMapRequest.adapt(make_params())
    assert req.format == 'image/png'
    assert req.version is None
    assert req.layers == ()


def test_crs_preferred_over_srs():
    req = GetMapRequest.adapt(make_params(CRS='EPSG:4326', SRS='EPSG:3857'))
    assert req.srs == 'EPSG:4326'


def test_transform_from_request():
    t = GetMapRequest.adapt(make_params()).transform()
    assert t.scale_x == 0.5
    assert t.scale_y == 0.5
    assert t.to_pixel_range(t.extent) == PixelRange(0, 0, 200, 100)


@pytest.mark.parametrize('missing', ['BBOX', 'WIDTH', 'HEIGHT'])
def test_missing_parameter(missing):
    params = make_params()
    del params[missing]
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(params)
    assert excinfo.value.codes == ['MissingParameterValue']


@pytest.mark.parametrize('width', ['abc', '0', '-5', '5000'])
def test_invalid_width(width):
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(make_params(WIDTH=width))
    assert excinfo.value.codes == ['InvalidParameterValue']


def test_invalid_format():
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(make_params(FORMAT='image/gif'))
    assert excinfo.value.codes == ['InvalidFormat']


def test_invalid_version():
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(make_params(VERSION='2.0'))
    assert excinfo.value.codes == ['InvalidParameterValue']


@pytest.mark.parametrize('bbox', ['1,2,3', '0,a,1,1'])
def test_malformed_bbox(bbox):
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(make_params(BBOX=bbox))
    assert excinfo.value.codes == ['InvalidParameterValue']


@pytest.mark.parametrize('bbox', ['10,0,5,10', '0,0,0,10'])
def test_invalid_geometry_becomes_service_exception(bbox):
    with pytest.raises(ServiceException) as excinfo:
        GetMapRequest.adapt(make_params(BBOX=bbox))
    assert excinfo.value.codes == []
    assert isinstance(excinfo.value.__cause__, InvalidGeometry)


def test_parse_bbox_strips_whitespace():
    assert parse_bbox(' -1.5, 2 ,3, 4.25') == BoundingBox(-1.5, 2, 3, 4.25)


def test_adapt_keeps_its_transform():
    req = GetMapRequest.adapt(make_params())
    assert req.transform() is req.transform()
    assert req.transform() == GetMapRequest(req.extent, req.pixel_range, req.format).transform()
