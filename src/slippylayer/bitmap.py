"""Raster buffer used for tile imagery.

Bitmaps are plain numpy arrays of shape (height, width, channels) with a
``uint8`` dtype, wrapped with row-level accessors and PIL conversions.
"""
import io

import numpy as np
from PIL import Image


class Bitmap:
    """Row-addressable RGBA (or other channel count) pixel buffer.

    Parameters
    ----------
    pixels : numpy.ndarray
        Array of shape (height, width) or (height, width, channels).
        2D input is treated as a single channel.
    """

    def __init__(self, pixels):
        pixels = np.asarray(pixels)
        if pixels.ndim == 2:
            pixels = pixels[:, :, np.newaxis]
        if pixels.ndim != 3:
            raise ValueError("pixels must be 2D or 3D")
        if pixels.dtype != np.uint8:
            pixels = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
        self.pixels = pixels

    @classmethod
    def blank(cls, width, height, channels=4):
        """Fully transparent (all zero) bitmap."""
        return cls(np.zeros((height, width, channels), dtype=np.uint8))

    @classmethod
    def from_image(cls, image):
        if image.mode not in ("L", "RGB", "RGBA"):
            image = image.convert("RGBA")
        return cls(np.array(image))

    @classmethod
    def from_bytes(cls, data):
        """Decode encoded image bytes (PNG, JPEG, ...).

        Raises
        ------
        PIL.UnidentifiedImageError
            If the bytes are not a recognised image.
        """
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return cls.from_image(image)

    @property
    def height(self):
        return self.pixels.shape[0]

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def channels(self):
        return self.pixels.shape[2]

    @property
    def shape(self):
        return self.pixels.shape

    def take_rows(self, indices):
        """Gather rows by index into a new (len(indices), width, channels) array."""
        return self.pixels.take(indices, axis=0)

    def copy(self):
        return Bitmap(self.pixels.copy())

    def to_image(self):
        # PIL infers L, LA, RGB or RGBA from the array shape.
        if self.channels == 1:
            return Image.fromarray(self.pixels[:, :, 0])
        return Image.fromarray(self.pixels)

    def to_bytes(self, format="PNG"):
        buf = io.BytesIO()
        self.to_image().save(buf, format=format)
        return buf.getvalue()

    def __eq__(self, other):
        if not isinstance(other, Bitmap):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"Bitmap(width={self.width}, height={self.height}, channels={self.channels})"
