"""
Random tile placement for the 2048 game.
"""

import logging

from numpy.random import Generator, default_rng

from gridmerge.core.gameboard import Board

# ##>: Tile spawn probabilities for 2048 game (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

_logger = logging.getLogger(__name__)


class Spawner:
    """
    Places new tiles on uniformly chosen empty cells.

    The random source is owned by the spawner, so a seeded spawner replays the same sequence of tiles.
    """

    def __init__(self, rng: Generator | int | None = None, probs: dict[int, float] | None = None):
        """
        Initialize the spawner.

        Parameters
        ----------
        rng : Generator | int | None, optional
            A NumPy generator, or a seed to build one (default is a fresh unseeded generator).
        probs : dict[int, float], optional
            Probability of each tile value (default is ``TILE_SPAWN_PROBS``).
        """
        self._rng = rng if isinstance(rng, Generator) else default_rng(rng)

        probs = TILE_SPAWN_PROBS if probs is None else probs
        self._values = list(probs)
        self._probs = [probs[value] for value in self._values]

    def spawn(self, board: Board) -> tuple[int, int, int] | None:
        """
        Put one new tile on a random empty cell.

        Parameters
        ----------
        board : Board
            The board to fill. **Modified in-place.**

        Returns
        -------
        tuple[int, int, int] | None
            The (row, col, value) of the new tile, or None when the board is full.

        Notes
        -----
        - The cell is chosen uniformly among the empty cells.
        - Callers are expected to check the board is not full; a full board is left as it is.
        """
        available_cells = board.empty_cells()
        if len(available_cells) == 0:
            _logger.debug('No empty cell left, nothing spawned')
            return None

        row, col = (int(index) for index in available_cells[self._rng.integers(len(available_cells))])
        value = int(self._rng.choice(self._values, p=self._probs))

        board.place(row, col, value)
        return row, col, value
