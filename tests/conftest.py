"""Shared pytest fixtures for slippylayer tests."""

from unittest.mock import MagicMock

import numpy as np
import pytest
import requests

from slippylayer.bitmap import Bitmap
from slippylayer.urls import LayerConfig


@pytest.fixture
def layer_config():
    """Provide a config pointing at a test tile host."""
    return LayerConfig(display_name="Test Map",
                       base_url="https://tiles.example.com/",
                       num_levels=4)


@pytest.fixture
def column_bitmap():
    """256x256 RGBA bitmap whose red channel holds the column index."""
    pixels = np.zeros((256, 256, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.arange(256, dtype=np.uint8)[np.newaxis, :]
    pixels[:, :, 3] = 255
    return Bitmap(pixels)


@pytest.fixture
def row_bitmap():
    """256x256 single channel bitmap whose value is the row index."""
    pixels = np.repeat(np.arange(256, dtype=np.uint8)[:, np.newaxis], 256, axis=1)
    return Bitmap(pixels)


@pytest.fixture
def png_bytes(column_bitmap):
    """Provide a valid 256x256 PNG tile."""
    return column_bitmap.to_bytes()


@pytest.fixture
def mock_session(png_bytes):
    """Provide a requests session mock that serves the PNG tile."""
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = 200
    response.content = png_bytes
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session


@pytest.fixture
def failing_session():
    """Provide a requests session mock whose requests time out."""
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("unreachable")
    return session


class FakeContext:
    """Render context that records drawn tiles."""

    def __init__(self, sector, level):
        self.sector = sector
        self.level = level
        self.drawn = []

    def draw_tile(self, tile, bitmap):
        self.drawn.append((tile, bitmap))


@pytest.fixture
def make_context():
    """Factory for recording render contexts."""
    return FakeContext
