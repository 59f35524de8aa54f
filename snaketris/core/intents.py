"""
Player intents.

The values double as the keys of the `controls` section in game_config.yaml.
"""

from enum import Enum


class Intent(Enum):
    SNAKE_UP = "snake_up"
    SNAKE_DOWN = "snake_down"
    SNAKE_LEFT = "snake_left"
    SNAKE_RIGHT = "snake_right"
    PIECE_LEFT = "piece_left"
    PIECE_RIGHT = "piece_right"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    RESTART = "restart"
