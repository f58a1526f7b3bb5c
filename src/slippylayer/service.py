"""Minimal tiled-imagery service for driving a slippy layer.

Implements the ``TilingService`` capabilities: it keeps the seeded top
level, walks the quadtree down to the requested level, downloads missing
tiles over HTTP, runs the registered transform on each fetched bitmap and
keeps the results in an LRU cache.
"""
import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests
from PIL import UnidentifiedImageError

from . import config
from .bitmap import Bitmap
from .errors import SlippyLayerError
from .pyramid import LevelSet
from .tiles import TILE_SIZE, sector_for

logger = logging.getLogger(__name__)


class TileService:
    """Fetch, transform, cache and draw tiles for one layer.

    Parameters
    ----------
    num_levels : int, optional
        Deepest level + 1 the service will subdivide to.
    cache_size : int, optional
        Maximum number of transformed tiles kept in memory.
    num_workers : int, optional
        Parallel downloads per ``fetch`` call.
    session : requests.Session, optional
        Session to reuse; a new one with the configured User-Agent otherwise.
    timeout : float, optional
        Per-request timeout in seconds.

    All optional parameters default to the values in ``slippylayer.config``.
    """

    def __init__(self, num_levels=None, cache_size=None, num_workers=None,
                 session=None, timeout=None, tile_size=TILE_SIZE):
        self.levels = LevelSet(int(num_levels or config.get("num_levels")), tile_size, tile_size)
        self.cache_size = int(cache_size or config.get("cache_size"))
        self.num_workers = int(num_workers or config.get("num_workers"))
        self.timeout = float(timeout or config.get("timeout"))
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = config.get("user_agent")
        self.session = session

        self.url_for = None
        self.transform = None
        self.top_level_tiles = []
        self._cache = OrderedDict()

    def register(self, url_for, transform):
        self.url_for = url_for
        self.transform = transform

    def seed(self, tiles):
        self.top_level_tiles = list(tiles)
        self.clear()

    def clear(self):
        self._cache.clear()

    def __len__(self):
        return len(self._cache)

    def __contains__(self, address):
        return address in self._cache

    def get(self, address):
        """Return the cached bitmap for ``address`` or None."""
        bitmap = self._cache.get(address)
        if bitmap is not None:
            self._cache.move_to_end(address)
        return bitmap

    def visible_tiles(self, sector, level):
        """Tiles at ``level`` that overlap ``sector``.

        Parameters
        ----------
        sector : Sector
            Area in view.
        level : int
            Requested level; the walk stops early at the deepest level.

        Returns
        -------
        list of Tile
            Overlapping tiles in quadtree order, starting from the seeded
            top level.
        """
        level = max(self.levels.first_level(), level)
        visible = []
        stack = [t for t in reversed(self.top_level_tiles) if t.sector.intersects(sector)]
        while stack:
            tile = stack.pop()
            if tile.address.level >= level or self.levels.is_last_level(tile.address.level):
                visible.append(tile)
                continue
            stack.extend(t for t in reversed(tile.children()) if t.sector.intersects(sector))
        return visible

    def placeholder(self):
        return Bitmap.blank(self.levels.tile_width, self.levels.tile_height)

    def _download(self, url):
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def _store(self, address, bitmap):
        self._cache[address] = bitmap
        self._cache.move_to_end(address)
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)

    def fetch(self, addresses):
        """Return bitmaps for ``addresses``, downloading what is not cached.

        Downloads run in a thread pool; decoding, the registered transform
        and cache insertion happen here as each download completes. A tile
        that fails to download or decode gets a transparent placeholder that
        is not cached.

        Parameters
        ----------
        addresses : iterable of TileAddress
            Tiles to provide.

        Returns
        -------
        dict
            Mapping of TileAddress to Bitmap, in the order requested.

        Raises
        ------
        SlippyLayerError
            If no URL resolver and transform were registered.
        """
        if self.url_for is None or self.transform is None:
            raise SlippyLayerError("No url_for/transform registered with the tile service")

        addresses = list(dict.fromkeys(addresses))
        results = {address: self.get(address) for address in addresses}
        missing = [address for address, bitmap in results.items() if bitmap is None]
        if not missing:
            return results

        logger.debug(f"Fetching {len(missing)} tiles")
        with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
            futures = {
                executor.submit(self._download, self.url_for(address)): address
                for address in missing
            }
            for future in as_completed(futures):
                address = futures[future]
                try:
                    bitmap = Bitmap.from_bytes(future.result())
                except (requests.RequestException, UnidentifiedImageError, OSError) as e:
                    logger.warning(f"Tile {address} unavailable: {e}")
                    results[address] = self.placeholder()
                    continue
                bitmap = self.transform(bitmap, sector_for(address))
                self._store(address, bitmap)
                results[address] = bitmap
        return results

    def render(self, context):
        """Draw the tiles visible in ``context`` for one frame.

        ``context`` must expose ``sector``, ``level`` and
        ``draw_tile(tile, bitmap)``; ``draw_tile`` is called once per
        visible tile.

        Returns
        -------
        int
            Number of tiles drawn.
        """
        tiles = self.visible_tiles(context.sector, context.level)
        bitmaps = self.fetch(tile.address for tile in tiles)
        for tile in tiles:
            context.draw_tile(tile, bitmaps[tile.address])
        return len(tiles)
