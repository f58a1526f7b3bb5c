"""Tile addressing for the Mercator slippy-map pyramid.

Local levels are 0-indexed and start from a 2x2 top level, so a tile at
``level`` sits at remote zoom ``level + 1`` and each axis holds
``2 ** (level + 1)`` tiles. Longitude is split uniformly by column while
latitude follows the inverse spherical Mercator projection by row.
"""
import math
from dataclasses import dataclass
from typing import Iterator

import mercantile

#: Northern limit of the spherical Mercator projection, in degrees.
MAX_LATITUDE = math.degrees(2.0 * math.atan(math.exp(math.pi)) - math.pi / 2.0)

TILE_SIZE = 256


def clamp_latitude(lat: float) -> float:
    """Clamp a latitude in degrees to the Mercator-valid band."""
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def mercator_y(lat: float) -> float:
    """Forward spherical Mercator for a latitude in degrees.

    Parameters
    ----------
    lat : float
        Latitude in degrees. Values beyond ``MAX_LATITUDE`` are clamped.

    Returns
    -------
    float
        Unitless Mercator Y in ``[-pi, pi]``.
    """
    phi = math.radians(clamp_latitude(lat))
    return math.log(math.tan(math.pi / 4.0 + phi / 2.0))


def mercator_latitude(y: float) -> float:
    """Inverse spherical Mercator, returning a clamped latitude in degrees.

    Parameters
    ----------
    y : float
        Unitless Mercator Y.

    Returns
    -------
    float
        Latitude in degrees within ``[-MAX_LATITUDE, MAX_LATITUDE]``.
    """
    lat = math.degrees(2.0 * math.atan(math.exp(y)) - math.pi / 2.0)
    return clamp_latitude(lat)


def tiles_per_axis(level: int) -> int:
    return 2 ** (level + 1)


def map_size_for_level(level: int, tile_size: int = TILE_SIZE) -> int:
    """Total pixel width (and height) of the whole map at ``level``."""
    return tile_size * tiles_per_axis(level)


@dataclass(frozen=True)
class Sector:
    """Angular bounding box in degrees."""
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @classmethod
    def full_globe(cls) -> "Sector":
        return cls(-MAX_LATITUDE, MAX_LATITUDE, -180.0, 180.0)

    @property
    def delta_latitude(self) -> float:
        return self.max_latitude - self.min_latitude

    @property
    def delta_longitude(self) -> float:
        return self.max_longitude - self.min_longitude

    @property
    def is_degenerate(self) -> bool:
        """True if the sector has no area (a point or a line)."""
        return self.delta_latitude <= 0.0 or self.delta_longitude <= 0.0

    def intersects(self, other: "Sector") -> bool:
        """Whether the two sectors overlap.

        Shared edges only count when one of the sectors has no area, so
        neighbouring tiles do not overlap but a point or line on a tile
        edge still touches the tiles on both sides.
        """
        if self.is_degenerate or other.is_degenerate:
            return not (other.max_longitude < self.min_longitude
                        or other.min_longitude > self.max_longitude
                        or other.max_latitude < self.min_latitude
                        or other.min_latitude > self.max_latitude)
        return not (other.max_longitude <= self.min_longitude
                    or other.min_longitude >= self.max_longitude
                    or other.max_latitude <= self.min_latitude
                    or other.min_latitude >= self.max_latitude)


@dataclass(frozen=True)
class TileAddress:
    """Position of a tile in the pyramid.

    Row 0 is the northernmost row and column 0 starts at -180 degrees.
    Callers are expected to keep ``column`` and ``row`` below
    ``tiles_per_axis(level)``.

    Parameters
    ----------
    level : int
        0-indexed local level (remote zoom minus one).
    column : int
        Tile column, west to east.
    row : int
        Tile row, north to south.
    """
    level: int
    column: int
    row: int

    def __post_init__(self):
        if self.level < 0:
            raise ValueError("level must be >= 0")

    @property
    def zoom(self) -> int:
        """Remote zoom level; the slippy scheme is 1-indexed at our root."""
        return self.level + 1

    @property
    def sector(self) -> Sector:
        return sector_for(self)

    def children(self) -> Iterator["TileAddress"]:
        """Yield the four quadtree children at the next level."""
        level = self.level + 1
        c, r = 2 * self.column, 2 * self.row
        yield TileAddress(level, c, r)
        yield TileAddress(level, c + 1, r)
        yield TileAddress(level, c, r + 1)
        yield TileAddress(level, c + 1, r + 1)

    def to_xyz(self) -> mercantile.Tile:
        return mercantile.Tile(x=self.column, y=self.row, z=self.zoom)

    @classmethod
    def from_xyz(cls, tile: mercantile.Tile) -> "TileAddress":
        return cls(tile.z - 1, tile.x, tile.y)


def sector_for(address: TileAddress) -> Sector:
    """Compute the angular sector covered by a tile.

    Parameters
    ----------
    address : TileAddress
        Tile to locate.

    Returns
    -------
    Sector
        Bounds in degrees of the matching XYZ tile, with latitudes clamped
        to the Mercator band.
    """
    w, s, e, n = mercantile.bounds(address.to_xyz())
    return Sector(clamp_latitude(s), clamp_latitude(n), w, e)
