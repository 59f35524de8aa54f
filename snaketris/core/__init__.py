"""
Snaketris Core - The simulation engine.

This module provides the grid simulation and all supporting systems
(piece catalog, spawning RNG, scoring, input buffering, scheduling).

Main exports:
- CoreGame: The per-tick simulation engine
- InputController: Buffers key intents and applies them between ticks
- GameLoop: Fixed-interval scheduler driving tick + render
- GameSnapshot: Read-only state handed to renderers
- GameConfig: Configuration loaded from game_config.yaml
"""

from snaketris.core.clock import MonotonicClock, VirtualClock
from snaketris.core.config_loader import GameConfig, get_config, load_config
from snaketris.core.controls import InputController
from snaketris.core.intents import Intent
from snaketris.core.game import CoreGame, TickResult
from snaketris.core.highscore import JsonHighScoreStore, MemoryHighScoreStore
from snaketris.core.loop import GameLoop
from snaketris.core.piece_catalog import PieceCatalog, PieceType
from snaketris.core.rng import RandomSource
from snaketris.core.state_snapshot import GameSnapshot

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "PieceType",
    "PieceCatalog",
    "CoreGame",
    "TickResult",
    "InputController",
    "Intent",
    "GameLoop",
    "GameSnapshot",
    "RandomSource",
    "MonotonicClock",
    "VirtualClock",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
]
