"""
Piece Catalog
=============

Provides convenient access to piece type definitions loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from snaketris.core.config_loader import GameConfig, PieceConfig, get_config
from snaketris.core.geometry import Cell


@dataclass(frozen=True)
class PieceType:
    """
    Runtime representation of a piece type.

    Wraps PieceConfig with rotation helpers. Instances are shared by
    reference between the catalog and every falling piece of that type.
    """
    config: PieceConfig
    index: int

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.config.color

    @property
    def rotations(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self.config.rotations

    @property
    def rotation_count(self) -> int:
        return len(self.config.rotations)

    def offsets(self, rotation: int) -> Tuple[Cell, ...]:
        """Relative cells of a rotation state (index wraps around)."""
        return self.config.rotations[rotation % self.rotation_count]

    def cells_at(self, rotation: int, x: int, y: int) -> List[Cell]:
        """Absolute cells of a rotation state anchored at (x, y)."""
        return [(x + dx, y + dy) for dx, dy in self.offsets(rotation)]

    def width(self, rotation: int = 0) -> int:
        return max(dx for dx, _ in self.offsets(rotation)) + 1

    def __repr__(self) -> str:
        return f"PieceType({self.index}: {self.name})"


class PieceCatalog:
    """
    Collection of all piece types.

    Immutable once built; indexed access mirrors the order in config.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._types: Tuple[PieceType, ...] = tuple(
            PieceType(piece_config, i) for i, piece_config in enumerate(config.pieces.types)
        )

    def __len__(self) -> int:
        """Total number of piece types."""
        return len(self._types)

    def __getitem__(self, index: int) -> PieceType:
        """Get piece type by index."""
        if 0 <= index < len(self._types):
            return self._types[index]
        raise IndexError(f"Piece index {index} out of range [0, {len(self._types)})")

    def __iter__(self):
        """Iterate over all piece types."""
        return iter(self._types)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def all_types(self) -> Tuple[PieceType, ...]:
        """All piece types in order."""
        return self._types

    def get_by_name(self, name: str) -> Optional[PieceType]:
        """Get piece type by name (case-insensitive)."""
        name_lower = name.lower()
        for piece_type in self._types:
            if piece_type.name.lower() == name_lower:
                return piece_type
        return None


# Module-level singleton
_cached_catalog: Optional[PieceCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> PieceCatalog:
    """
    Get the piece catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        PieceCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or (config is not None and config is not _cached_catalog.config):
        _cached_catalog = PieceCatalog(config)
    return _cached_catalog
