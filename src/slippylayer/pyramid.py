"""Top-level seeding of the geographic quadtree.

The Mercator tile layout starts from a 2x2 grid covering the whole
projection instead of the single tile a generic quadtree assumes, so the
four level-0 tiles are created explicitly here. Deeper levels come from
``TileAddress.children``.
"""
from dataclasses import dataclass, field
from typing import List

from .errors import ConfigurationError
from .tiles import TILE_SIZE, Sector, TileAddress, map_size_for_level, sector_for

TOP_LEVEL = ((0, 0), (0, 1), (1, 0), (1, 1))


@dataclass(frozen=True)
class Tile:
    """A tile address paired with its angular sector."""
    address: TileAddress
    sector: Sector

    @classmethod
    def at(cls, level, column, row):
        address = TileAddress(level, column, row)
        return cls(address, sector_for(address))

    def children(self) -> List["Tile"]:
        return [Tile(child, sector_for(child)) for child in self.address.children()]


@dataclass(frozen=True)
class LevelSet:
    """Shape of the tile pyramid served by one layer.

    Parameters
    ----------
    num_levels : int
        Number of levels, so the deepest level is ``num_levels - 1``.
    tile_width, tile_height : int, optional
        Tile size in pixels, by default 256.
    sector : Sector, optional
        Area covered by level 0, by default the full Mercator globe.
    """
    num_levels: int
    tile_width: int = TILE_SIZE
    tile_height: int = TILE_SIZE
    sector: Sector = field(default_factory=Sector.full_globe)

    def __post_init__(self):
        if self.num_levels < 1:
            raise ConfigurationError(f"num_levels must be >= 1, got {self.num_levels}")

    def first_level(self) -> int:
        return 0

    def last_level(self) -> int:
        return self.num_levels - 1

    def is_last_level(self, level: int) -> bool:
        return level >= self.last_level()

    def map_size(self, level: int) -> int:
        return map_size_for_level(level, self.tile_width)


def seed_top_level() -> List[Tile]:
    """Return the four level-0 tiles in (column, row) order.

    Returns
    -------
    list of Tile
        Tiles ``(0,0,0)``, ``(0,0,1)``, ``(0,1,0)`` and ``(0,1,1)`` as
        (level, column, row), together covering ``Sector.full_globe()``.
    """
    return [Tile.at(0, column, row) for column, row in TOP_LEVEL]
