"""
Tests for the piece catalog and piece geometry.
"""

import pytest

from snaketris.core.piece_catalog import PieceCatalog, get_catalog


@pytest.fixture
def catalog(config):
    return PieceCatalog(config)


class TestCatalog:
    """Test catalog contents."""

    def test_seven_types(self, catalog):
        """Catalog holds the seven tetromino types in order."""
        assert len(catalog) == 7
        assert [p.name for p in catalog] == ["I", "O", "T", "L", "J", "S", "Z"]

    def test_every_rotation_has_four_cells(self, catalog):
        """All rotation states are four distinct cells."""
        for piece in catalog:
            for rotation in range(piece.rotation_count):
                assert len(set(piece.offsets(rotation))) == 4

    def test_rotation_counts(self, catalog):
        """Rotation state counts per type."""
        counts = {p.name: p.rotation_count for p in catalog}
        assert counts == {"I": 2, "O": 1, "T": 4, "L": 4, "J": 4, "S": 2, "Z": 2}

    def test_lookup_by_name(self, catalog):
        """Name lookup is case-insensitive."""
        assert catalog.get_by_name("t") is catalog[2]
        assert catalog.get_by_name("X") is None

    def test_index_out_of_range(self, catalog):
        """Indexing past the catalog raises IndexError."""
        with pytest.raises(IndexError):
            catalog[7]

    def test_get_catalog_reuses_instance(self, config):
        """The shared catalog is built once per config."""
        assert get_catalog(config) is get_catalog(config)

    def test_game_pieces_share_catalog_types(self, game):
        """Falling pieces reference catalog entries rather than copies."""
        piece = game.spawn_piece()
        assert any(piece.piece_type is t for t in game.catalog)


class TestPieceGeometry:
    """Test offsets and placement."""

    def test_rotation_index_wraps(self, catalog):
        """Rotation index is taken modulo the rotation count."""
        i_piece = catalog.get_by_name("I")
        assert i_piece.offsets(2) == i_piece.offsets(0)
        assert i_piece.offsets(-1) == i_piece.offsets(1)

    def test_cells_at(self, catalog):
        """Offsets are anchored at the given column and row."""
        o_piece = catalog.get_by_name("O")
        assert sorted(o_piece.cells_at(0, 4, 7)) == [(4, 7), (4, 8), (5, 7), (5, 8)]

    def test_width(self, catalog):
        i_piece = catalog.get_by_name("I")
        assert i_piece.width(0) == 4
        assert i_piece.width(1) == 1
