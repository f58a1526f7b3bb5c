"""Slippy map (XYZ, spherical Mercator) imagery for geographic tile pyramids.

Tiles fetched from a slippy map host are reprojected row by row onto the
equirectangular grid a globe renderer expects.
"""

__version__ = "0.1.0"

from . import config
from .errors import SlippyLayerError, ConfigurationError
from .tiles import MAX_LATITUDE, Sector, TileAddress, sector_for, mercator_y, mercator_latitude
from .bitmap import Bitmap
from .urls import LayerConfig, UrlResolver
from .reproject import MercatorReprojector
from .pyramid import LevelSet, Tile, seed_top_level
from .layer import SlippyImageLayer, TilingService
from .service import TileService
