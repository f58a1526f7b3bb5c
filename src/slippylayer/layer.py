"""Slippy map imagery layer.

Wires the XYZ URL resolver and the Mercator reprojector into a tiling
service and seeds the service with the 2x2 Mercator top level.
"""
import logging
from typing import Callable, List, Optional, Protocol

from . import config
from .bitmap import Bitmap
from .pyramid import LevelSet, Tile, seed_top_level
from .reproject import MercatorReprojector
from .tiles import TILE_SIZE, Sector, TileAddress
from .urls import LayerConfig, UrlResolver

logger = logging.getLogger(__name__)

UrlFor = Callable[[TileAddress], str]
Transform = Callable[[Bitmap, Sector], Bitmap]


class TilingService(Protocol):
    """Capabilities the layer needs from a tiled-imagery framework."""

    def register(self, url_for: UrlFor, transform: Transform) -> None:
        ...

    def seed(self, tiles: List[Tile]) -> None:
        ...

    def render(self, context) -> int:
        ...


class SlippyImageLayer:
    """Map layer showing slippy-map (XYZ) imagery on a geographic globe.

    Parameters
    ----------
    service : TilingService
        Framework that schedules fetches, caches tiles and draws them.
    layer_config : LayerConfig, optional
        Display name, tile host and level count. Read from settings if None.
    resampling : str, optional
        Row resampling for the reprojector. Read from settings if None.

    Attributes
    ----------
    image_size : int
        Tile size in pixels, fixed by the remote scheme.
    pick_enabled : bool
        Always False; the layer is visual only.
    """

    image_size = TILE_SIZE

    def __init__(self, service: TilingService, layer_config: Optional[LayerConfig] = None,
                 resampling: Optional[str] = None):
        self.config = layer_config or LayerConfig.from_settings()
        self.display_name = self.config.display_name
        self.pick_enabled = False
        self.levels = LevelSet(self.config.num_levels, self.image_size, self.image_size)
        self.sector = self.levels.sector

        self.resolver = UrlResolver(self.config)
        self.reprojector = MercatorReprojector(resampling or config.get("resampling"))

        self.service = service
        self.service.register(url_for=self.resolver.url_for,
                              transform=self.reprojector.reproject)
        self.top_level_tiles: List[Tile] = []
        self.reset()

    def reset(self):
        """(Re)create the 2x2 top level and hand it to the service."""
        self.top_level_tiles = seed_top_level()
        self.service.seed(self.top_level_tiles)
        logger.debug(f"Seeded {len(self.top_level_tiles)} top-level tiles for {self.display_name!r}")

    def render(self, context) -> int:
        """Draw one frame; returns the number of tiles the service drew."""
        return self.service.render(context)

    def map_size_for_level(self, level: int) -> int:
        return self.levels.map_size(level)

    def __repr__(self):
        return f"SlippyImageLayer({self.display_name!r}, {self.config.base_url!r})"
