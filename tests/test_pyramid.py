"""Tests for the slippylayer.pyramid module."""

import pytest

from slippylayer.errors import ConfigurationError
from slippylayer.pyramid import LevelSet, Tile, seed_top_level
from slippylayer.tiles import MAX_LATITUDE, Sector, TileAddress


class TestSeedTopLevel:
    """Tests for the seed_top_level function."""

    def test_four_tiles_in_order(self):
        """Seeding should produce the 2x2 level-0 grid in column, row order."""
        tiles = seed_top_level()
        assert [t.address for t in tiles] == [
            TileAddress(0, 0, 0), TileAddress(0, 0, 1),
            TileAddress(0, 1, 0), TileAddress(0, 1, 1),
        ]

    def test_union_is_full_globe(self):
        """The four sectors should cover the supported globe."""
        sectors = [tile.sector for tile in seed_top_level()]
        assert min(s.min_longitude for s in sectors) == -180.0
        assert max(s.max_longitude for s in sectors) == 180.0
        assert max(s.max_latitude for s in sectors) == pytest.approx(MAX_LATITUDE)
        assert min(s.min_latitude for s in sectors) == pytest.approx(-MAX_LATITUDE)

    def test_no_gaps_or_overlaps(self):
        """Tiles should meet at the equator and the prime meridian only."""
        tiles = seed_top_level()
        for i, a in enumerate(tiles):
            for b in tiles[i + 1:]:
                assert not a.sector.intersects(b.sector)
        total = sum(t.sector.delta_latitude * t.sector.delta_longitude for t in tiles)
        full = Sector.full_globe()
        assert total == pytest.approx(full.delta_latitude * full.delta_longitude)

    def test_is_deterministic(self):
        """Repeated seeding should give equal tiles."""
        assert seed_top_level() == seed_top_level()


class TestTile:
    """Tests for the Tile value type."""

    def test_at(self):
        """Tile.at should pair an address with its sector."""
        tile = Tile.at(1, 2, 0)
        assert tile.address == TileAddress(1, 2, 0)
        assert tile.sector == TileAddress(1, 2, 0).sector

    def test_children(self):
        """children should return four tiles one level down."""
        children = Tile.at(0, 1, 0).children()
        assert len(children) == 4
        assert all(c.address.level == 1 for c in children)


class TestLevelSet:
    """Tests for the LevelSet dataclass."""

    def test_levels(self):
        """first/last level helpers should follow num_levels."""
        levels = LevelSet(19)
        assert levels.first_level() == 0
        assert levels.last_level() == 18
        assert levels.is_last_level(18)
        assert not levels.is_last_level(3)

    def test_defaults(self):
        """Tiles should default to 256 px over the full globe."""
        levels = LevelSet(3)
        assert (levels.tile_width, levels.tile_height) == (256, 256)
        assert levels.sector == Sector.full_globe()

    def test_map_size(self):
        """map_size should be tile_size * 2 ** (level + 1)."""
        assert LevelSet(5).map_size(0) == 512
        assert LevelSet(5).map_size(3) == 4096

    def test_rejects_empty(self):
        """Zero levels should raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            LevelSet(0)
