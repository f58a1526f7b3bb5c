"""Resample Mercator tiles onto the equirectangular tile grid.

Spherical Mercator and equirectangular projections share the same
longitude mapping, so a fetched tile only needs its rows resampled: each
output row is placed at a uniform latitude step and pulled from the source
row at the matching Mercator-Y. Columns are copied unchanged.
"""
import math

import numpy as np

from .bitmap import Bitmap
from .errors import ConfigurationError
from .tiles import MAX_LATITUDE, Sector, mercator_y

RESAMPLING_METHODS = ("nearest", "bilinear")


def _mercator_y(lats: np.ndarray) -> np.ndarray:
    """Vectorised forward Mercator for latitudes in degrees."""
    phi = np.radians(np.clip(lats, -MAX_LATITUDE, MAX_LATITUDE))
    return np.log(np.tan(np.pi / 4.0 + phi / 2.0))


def source_rows(sector: Sector, height: int, source_height: int) -> np.ndarray:
    """Fractional source row sampled by each output row.

    Parameters
    ----------
    sector : Sector
        Geographic bounds of the tile. The source tile spans the Mercator-Y
        band between the sector's latitude limits.
    height : int
        Number of output rows.
    source_height : int
        Number of rows in the Mercator source tile.

    Returns
    -------
    numpy.ndarray
        Float array of length ``height`` using pixel-centre coordinates,
        i.e. 0.0 is the centre of the first source row. Values are not
        clamped.
    """
    lats = sector.max_latitude - (np.arange(height) + 0.5) / height * sector.delta_latitude
    y_top = mercator_y(sector.max_latitude)
    y_bottom = mercator_y(sector.min_latitude)
    return (y_top - _mercator_y(lats)) / (y_top - y_bottom) * source_height - 0.5


class MercatorReprojector:
    """Stateless row resampler from Mercator to geographic tiles.

    Parameters
    ----------
    resampling : str, optional
        ``"nearest"`` or ``"bilinear"``, by default ``"bilinear"``. The
        choice affects visual quality only.

    Raises
    ------
    ConfigurationError
        If the resampling method is unknown.
    """

    def __init__(self, resampling="bilinear"):
        if resampling not in RESAMPLING_METHODS:
            raise ConfigurationError(
                f"Unknown resampling {resampling!r}, expected one of {RESAMPLING_METHODS}")
        self.resampling = resampling

    def reproject(self, source: Bitmap, sector: Sector) -> Bitmap:
        """Resample a Mercator tile into the sector's latitude grid.

        Parameters
        ----------
        source : Bitmap
            Fetched tile, rows uniform in Mercator-Y. Not modified.
        sector : Sector
            Bounds of the tile the bitmap was fetched for.

        Returns
        -------
        Bitmap
            New bitmap of the same size whose rows are uniform in latitude.
        """
        if math.isclose(sector.max_latitude, sector.min_latitude):
            return source.copy()

        height = source.height
        rows = source_rows(sector, height, source.height)
        last = source.height - 1

        if self.resampling == "nearest":
            index = np.clip(np.floor(rows + 0.5).astype(np.intp), 0, last)
            return Bitmap(source.take_rows(index))

        rows = np.clip(rows, 0.0, last)
        lower = np.floor(rows).astype(np.intp)
        upper = np.minimum(lower + 1, last)
        weight = (rows - lower)[:, np.newaxis, np.newaxis]
        blended = (source.take_rows(lower) * (1.0 - weight)
                   + source.take_rows(upper) * weight)
        return Bitmap(np.rint(blended).astype(np.uint8))
