"""
Configuration for a game of 2048.

Defaults follow the classic game: a 4x4 board, a winning tile of 2048 and new tiles that are 2 nine times out of ten.
"""

from dataclasses import dataclass, field
from pathlib import Path

from gridmerge.core.gameboard import is_tile_value
from gridmerge.errors import InvalidSize

# ##>: Smallest board the move rules make sense on.
MIN_SIZE = 2


@dataclass
class GameConfig:
    """
    Configuration for a game session.

    Attributes are organized by concern: board, rules, spawning and persistence.
    """

    # ##>: Board parameters.
    size: int = 4  # Side length of the square grid

    # ##>: Rules.
    win_tile: int = 2048  # Merge result that wins the game
    undo_limit: int = 1  # Moves that can be undone, 0 disables undo

    # ##>: Spawning.
    initial_tiles: int = 2  # Tiles placed on an empty board
    spawn_probs: dict[int, float] = field(default_factory=lambda: {2: 0.9, 4: 0.1})

    # ##>: Persistence.
    save_dir: Path = Path('SaveData')  # One grid{size}.json per board size

    def __post_init__(self):
        if self.size < MIN_SIZE:
            raise InvalidSize(self.size)
        if self.undo_limit < 0:
            raise ValueError(f'undo_limit must be >= 0, got {self.undo_limit}')
        if self.initial_tiles < 1 or self.initial_tiles > self.size**2:
            raise ValueError(f'initial_tiles must be in [1, {self.size ** 2}], got {self.initial_tiles}')
        invalid = [value for value in self.spawn_probs if not isinstance(value, int) or not is_tile_value(value)]
        if invalid:
            raise ValueError(f'spawn_probs keys must be powers of two >= 2, got {invalid}')
        if abs(sum(self.spawn_probs.values()) - 1.0) > 1e-9:
            raise ValueError(f'spawn_probs must sum to 1, got {self.spawn_probs}')
        self.save_dir = Path(self.save_dir)
