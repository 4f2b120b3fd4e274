# -*- coding: utf-8 -*-

"""
mapserver/config.py

Central configuration for the map server. Everything tunable lives here
as plain module-level dictionaries so the transform core, the WMS request
layer and the rendering service read the same values.

Contents:
---------
1. TRANSFORM:
   - `default_origin`: pixel origin used when a transform is built from an
     extent and a scale without an explicit origin.

2. WMS:
   - `versions`: protocol versions accepted in the VERSION parameter.
   - `formats`: output MIME types accepted in FORMAT; the first one is the
     default when FORMAT is omitted.
   - `max_width` / `max_height`: upper limit on the requested image size (pixels).
   - `resample`: Pillow resampling filter name used when the cropped base
     raster is scaled to the requested size ('nearest', 'bilinear', 'bicubic', 'lanczos').
   - `background`: RGBA fill for parts of a request outside the base raster.

3. LOGGING:
   - `level` and `format` for the "mapserver" package logger.

Usage:
------
    from mapserver.config import WMS

    if width > WMS['max_width']:
        ...

If these ever need to come from a file or the environment, load them here
and keep the dictionary names stable.

"""

# ───────────────────────────────────────────────────────────────────────────────
# 1) TRANSFORM DEFAULTS
# ───────────────────────────────────────────────────────────────────────────────
TRANSFORM = {
    'default_origin': (0, 0),   # (min_x, min_y) of the generated pixel range
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) WMS REQUEST HANDLING
# ───────────────────────────────────────────────────────────────────────────────
WMS = {
    'versions': ('1.1.1', '1.3.0'),
    'formats': ('image/png', 'image/jpeg'),
    'max_width': 4096,          # pixels
    'max_height': 4096,         # pixels
    'resample': 'nearest',
    'background': (0, 0, 0, 0), # transparent
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) LOGGING
# ───────────────────────────────────────────────────────────────────────────────
LOGGING = {
    'level': 'INFO',
    'format': '[%(levelname)s] %(message)s',
}
