"""Single-board 2048 sliding-tile game engine."""

from .config import GameConfig
from .envs import GameSession, GameStatus
from .errors import CorruptRecord, GameNotStarted, GridMergeError, InvalidDirection, InvalidSize

__all__ = [
    "GameConfig",
    "GameSession",
    "GameStatus",
    "CorruptRecord",
    "GameNotStarted",
    "GridMergeError",
    "InvalidDirection",
    "InvalidSize",
]
