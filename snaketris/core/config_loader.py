"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from snaketris.core.intents import Intent

logger = logging.getLogger(__name__)

# Every piece in the catalog is a tetromino
CELLS_PER_PIECE = 4


@dataclass(frozen=True)
class BoardConfig:
    """Grid dimensions in cells."""
    width: int
    height: int


@dataclass(frozen=True)
class SnakeConfig:
    """Starting snake layout."""
    start_length: int
    start_direction: Tuple[int, int]


@dataclass(frozen=True)
class SpeedConfig:
    """Base speed scalars, their clamps, and the per-apple speed-up."""
    snake_interval: float      # Seconds between snake ticks
    snake_interval_min: float
    drop_interval: float       # Seconds between a settle and the next spawn
    drop_interval_min: float
    fall_rate: float           # Rows per tick
    fall_rate_max: float
    speed_up_factor: float
    fall_rate_factor: float


@dataclass(frozen=True)
class ScoringConfig:
    """Points awarded per event."""
    apple_points_per_segment: int
    star_bonus: int
    destroy_settled_points: int
    destroy_falling_points: int


@dataclass(frozen=True)
class StarConfig:
    """Star spawn cadence and destruction mode window."""
    spawn_delay_min: float
    spawn_delay_max: float
    destruction_duration: float


@dataclass(frozen=True)
class ExplosionConfig:
    """Explosion lifetime."""
    duration: float


@dataclass(frozen=True)
class PieceConfig:
    """Configuration for a single piece type."""
    name: str
    color: Tuple[int, int, int]
    rotations: Tuple[Tuple[Tuple[int, int], ...], ...]


@dataclass(frozen=True)
class PiecesConfig:
    """The piece library and its spawn margin."""
    spawn_margin: int
    types: Tuple[PieceConfig, ...]


@dataclass(frozen=True)
class ControlsConfig:
    """Key name bindings per intent."""
    bindings: Tuple[Tuple[str, Tuple[str, ...]], ...]

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self.bindings)


@dataclass(frozen=True)
class HighScoreConfig:
    """Where the high score is persisted."""
    path: str

    @property
    def resolved_path(self) -> Path:
        return Path(os.path.expanduser(self.path))


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    snake: SnakeConfig
    speed: SpeedConfig
    scoring: ScoringConfig
    star: StarConfig
    explosion: ExplosionConfig
    pieces: PiecesConfig
    controls: ControlsConfig
    high_score: HighScoreConfig

    @property
    def num_piece_types(self) -> int:
        """Total number of piece types in the catalog."""
        return len(self.pieces.types)

    @property
    def max_spawn_x(self) -> int:
        """Largest column a new piece may spawn at."""
        return self.board.width - self.pieces.spawn_margin

    def get_piece(self, index: int) -> PieceConfig:
        """Get piece config by index."""
        if 0 <= index < len(self.pieces.types):
            return self.pieces.types[index]
        raise ValueError(f"Invalid piece index: {index}")


def _parse_pair(data: List, what: str) -> Tuple[int, int]:
    if len(data) != 2:
        raise ValueError(f"{what} must have 2 values [x, y], got {data}")
    return (int(data[0]), int(data[1]))


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    color = (int(color_data[0]), int(color_data[1]), int(color_data[2]))
    if any(c < 0 or c > 255 for c in color):
        raise ValueError(f"Color channels must be in [0, 255], got {color}")
    return color


def _parse_piece(piece_data: dict) -> PieceConfig:
    """Parse a single piece type from YAML."""
    name = str(piece_data["name"])
    rotations = []
    for rotation in piece_data["rotations"]:
        cells = tuple(_parse_pair(cell, f"Piece {name} offset") for cell in rotation)
        rotations.append(cells)
    return PieceConfig(
        name=name,
        color=_parse_color(piece_data["color"]),
        rotations=tuple(rotations),
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.width <= config.pieces.spawn_margin or board.height < CELLS_PER_PIECE:
        raise ValueError(
            f"Board {board.width}x{board.height} is too small for "
            f"spawn_margin {config.pieces.spawn_margin}"
        )

    if config.snake.start_length < 1 or config.snake.start_length > min(board.width, board.height) // 2:
        raise ValueError(
            f"start_length ({config.snake.start_length}) must fit behind the board centre"
        )

    dx, dy = config.snake.start_direction
    if abs(dx) + abs(dy) != 1:
        raise ValueError(f"start_direction must be a unit cardinal vector, got {(dx, dy)}")

    speed = config.speed
    if speed.snake_interval_min > speed.snake_interval:
        raise ValueError("snake_interval_min must not exceed snake_interval")
    if speed.drop_interval_min > speed.drop_interval:
        raise ValueError("drop_interval_min must not exceed drop_interval")
    if speed.fall_rate_max < speed.fall_rate:
        raise ValueError("fall_rate_max must not be below fall_rate")
    if not 0.0 < speed.speed_up_factor < 1.0:
        raise ValueError(f"speed_up_factor must be in (0, 1), got {speed.speed_up_factor}")
    if speed.fall_rate_factor <= 1.0:
        raise ValueError(f"fall_rate_factor must exceed 1, got {speed.fall_rate_factor}")

    if config.star.spawn_delay_min > config.star.spawn_delay_max:
        raise ValueError("star spawn_delay_min must not exceed spawn_delay_max")

    if not config.pieces.types:
        raise ValueError("At least one piece type is required")
    for piece in config.pieces.types:
        if not piece.rotations:
            raise ValueError(f"Piece {piece.name} has no rotations")
        for rotation in piece.rotations:
            if len(set(rotation)) != CELLS_PER_PIECE:
                raise ValueError(
                    f"Piece {piece.name} rotation must have {CELLS_PER_PIECE} distinct "
                    f"cells, got {rotation}"
                )
            width = max(x for x, _ in rotation) + 1
            if min(x for x, _ in rotation) < 0 or min(y for _, y in rotation) < 0:
                raise ValueError(f"Piece {piece.name} offsets must be non-negative")
            if width > config.pieces.spawn_margin:
                raise ValueError(
                    f"Piece {piece.name} is wider than spawn_margin "
                    f"({width} > {config.pieces.spawn_margin})"
                )

    known = {intent.value for intent in Intent}
    for intent, _ in config.controls.bindings:
        if intent not in known:
            raise ValueError(f"Unknown control intent: {intent}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    snake_data = raw["snake"]
    snake = SnakeConfig(
        start_length=int(snake_data.get("start_length", 4)),
        start_direction=_parse_pair(snake_data.get("start_direction", [1, 0]), "start_direction")
    )

    speed_data = raw["speed"]
    speed = SpeedConfig(
        snake_interval=float(speed_data["snake_interval"]),
        snake_interval_min=float(speed_data["snake_interval_min"]),
        drop_interval=float(speed_data["drop_interval"]),
        drop_interval_min=float(speed_data["drop_interval_min"]),
        fall_rate=float(speed_data["fall_rate"]),
        fall_rate_max=float(speed_data["fall_rate_max"]),
        speed_up_factor=float(speed_data.get("speed_up_factor", 0.9)),
        fall_rate_factor=float(speed_data.get("fall_rate_factor", 1.1))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        apple_points_per_segment=int(scoring_data["apple_points_per_segment"]),
        star_bonus=int(scoring_data["star_bonus"]),
        destroy_settled_points=int(scoring_data["destroy_settled_points"]),
        destroy_falling_points=int(scoring_data["destroy_falling_points"])
    )

    star_data = raw["star"]
    star = StarConfig(
        spawn_delay_min=float(star_data["spawn_delay_min"]),
        spawn_delay_max=float(star_data["spawn_delay_max"]),
        destruction_duration=float(star_data["destruction_duration"])
    )

    explosion_data = raw.get("explosion", {})
    explosion = ExplosionConfig(
        duration=float(explosion_data.get("duration", 0.6))
    )

    pieces_data = raw["pieces"]
    pieces = PiecesConfig(
        spawn_margin=int(pieces_data.get("spawn_margin", 4)),
        types=tuple(_parse_piece(p) for p in pieces_data["types"])
    )

    # Optional sections
    controls_data = raw.get("controls", {})
    controls = ControlsConfig(
        bindings=tuple(
            (str(intent), tuple(str(k).lower() for k in keys))
            for intent, keys in controls_data.items()
        )
    )

    high_score_data = raw.get("high_score", {})
    high_score = HighScoreConfig(
        path=str(high_score_data.get("path", "~/.snaketris/high_score.json"))
    )

    config = GameConfig(
        board=board,
        snake=snake,
        speed=speed,
        scoring=scoring,
        star=star,
        explosion=explosion,
        pieces=pieces,
        controls=controls,
        high_score=high_score
    )

    _validate_config(config)
    logger.debug("Loaded config from %s", config_path)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
