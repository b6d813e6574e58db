"""
Board state for the 2048 game: the grid of tiles and the counters derived from it.
"""

from dataclasses import dataclass, field

from numpy import all as np_all
from numpy import argwhere, array, count_nonzero, int64, ndarray, zeros

from gridmerge.core.history import Snapshot
from gridmerge.errors import InvalidSize

# ##: Merge result that wins the game.
WIN_TILE = 2048

# ##: Largest tile an int64 cell holds. Two of them never merge.
MAX_TILE = 1 << 62


def is_tile_value(value: int) -> bool:
    """
    Check if a value can be held by a non-empty cell.

    Parameters
    ----------
    value : int
        The value to check.

    Returns
    -------
    bool
        True if the value is a power of two greater than or equal to 2.
    """
    return value >= 2 and value & (value - 1) == 0


def mergeable_pairs(cells: ndarray) -> tuple[ndarray, ndarray]:
    """
    Locate the pairs of adjacent cells that can merge.

    Parameters
    ----------
    cells : ndarray
        The game board.

    Returns
    -------
    tuple[ndarray, ndarray]
        Horizontal mask of shape (n, n - 1), True where a cell can merge with its right neighbour, and vertical mask
        of shape (n - 1, n), True where a cell can merge with the one below.
    """
    mergeable = (cells != 0) & (cells < MAX_TILE)
    h_pairs = mergeable[:, :-1] & (cells[:, :-1] == cells[:, 1:])
    v_pairs = mergeable[:-1, :] & (cells[:-1, :] == cells[1:, :])
    return h_pairs, v_pairs


def count_mergeable_pairs(cells: ndarray) -> int:
    """
    Count the pairs of adjacent cells holding the same non-zero value.

    Parameters
    ----------
    cells : ndarray
        The game board.

    Returns
    -------
    int
        Number of right-neighbour and down-neighbour pairs with equal non-zero values, each pair counted once.

    Notes
    -----
    - This is the liveness signal of the game, not a test of whether a tile can slide.
    - A board that is not full always has at least one legal move into an empty cell.
    - Pairs of ``MAX_TILE`` are not counted: their merge would overflow the cells.
    """
    h_pairs, v_pairs = mergeable_pairs(cells)
    return int(count_nonzero(h_pairs) + count_nonzero(v_pairs))


def is_full(cells: ndarray) -> bool:
    """Check if every cell of the board holds a tile."""
    return bool(np_all(cells != 0))


def is_done(cells: ndarray) -> bool:
    """
    Check if the game is lost.

    Parameters
    ----------
    cells : ndarray
        The game board.

    Returns
    -------
    bool
        True if the board is full and no two adjacent tiles can merge.
    """
    return is_full(cells) and count_mergeable_pairs(cells) == 0


@dataclass(eq=False)
class Board:
    """
    Grid of tile values with the score and win bookkeeping of one game.

    Empty cells hold 0. Any other value is a power of two, written either by a move (doubling an existing tile)
    or by the spawner (placing a 2 or a 4).
    """

    size: int
    win_tile: int = WIN_TILE

    # ##: Game state.
    cells: ndarray = field(init=False, repr=False)
    tile_count: int = field(default=0, init=False)
    score: int = field(default=0, init=False)
    high_score: int = field(default=0, init=False)
    has_won: bool = field(default=False, init=False)
    continued: bool = field(default=False, init=False)

    def __post_init__(self):
        if self.size < 2:
            raise InvalidSize(self.size)
        self.cells = zeros((self.size, self.size), dtype=int64)

    @classmethod
    def from_cells(
        cls,
        cells,
        score: int = 0,
        high_score: int | None = None,
        has_won: bool = False,
        continued: bool = False,
        win_tile: int = WIN_TILE,
    ) -> 'Board':
        """
        Build a board from an existing grid.

        Parameters
        ----------
        cells : array_like
            Square grid of tile values, 0 for empty cells.
        score : int, optional
            Current score (default is 0).
        high_score : int, optional
            High score for this board size, defaults to the score.
        has_won : bool, optional
            Whether the winning tile has already been reached.
        continued : bool, optional
            Whether the player kept playing after winning.
        win_tile : int, optional
            Merge result that wins the game.

        Returns
        -------
        Board
            A board holding a copy of the grid.

        Raises
        ------
        ValueError
            If the grid is not square, smaller than 2x2, holds a value that is not a power of two, or if the
            scores are inconsistent.
        """
        grid = array(cells, dtype=int64)
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1] or grid.shape[0] < 2:
            raise ValueError(f'cells must be a square grid of side >= 2, got shape {grid.shape}')
        for value in grid[grid != 0].tolist():
            if not is_tile_value(value):
                raise ValueError(f'tile values must be powers of two >= 2, got {value}')

        high_score = score if high_score is None else high_score
        if score < 0 or high_score < score:
            raise ValueError(f'expected 0 <= score <= high_score, got {score} and {high_score}')

        board = cls(size=grid.shape[0], win_tile=win_tile)
        board.cells = grid
        board.tile_count = int(count_nonzero(grid))
        board.score = int(score)
        board.high_score = int(high_score)
        board.has_won = bool(has_won)
        board.continued = bool(continued)
        return board

    def get(self, row: int, col: int) -> int:
        """Return the value of a cell, 0 when empty."""
        return int(self.cells[row, col])

    def place(self, row: int, col: int, value: int) -> None:
        """
        Put a new tile on an empty cell.

        Parameters
        ----------
        row : int
            Row of the cell.
        col : int
            Column of the cell.
        value : int
            Tile value, a power of two.

        Raises
        ------
        ValueError
            If the cell is occupied or the value is not a power of two.
        """
        if not is_tile_value(value):
            raise ValueError(f'tile values must be powers of two >= 2, got {value}')
        if self.cells[row, col] != 0:
            raise ValueError(f'cell ({row}, {col}) is already occupied')

        self.cells[row, col] = value
        self.tile_count += 1

    def empty_cells(self) -> ndarray:
        """Positions (row, col) of the empty cells, in row-major order."""
        return argwhere(self.cells == 0)

    def add_score(self, points: int) -> None:
        """Increase the score, carrying the high score along."""
        self.score += points
        if self.score > self.high_score:
            self.high_score = self.score

    def is_full(self) -> bool:
        return self.tile_count == self.size**2

    def count_mergeable_pairs(self) -> int:
        return count_mergeable_pairs(self.cells)

    def is_done(self) -> bool:
        return self.is_full() and self.count_mergeable_pairs() == 0

    def snapshot(self) -> Snapshot:
        """
        Capture the part of the state that undo restores.

        Returns
        -------
        Snapshot
            A read-only copy of the cells with the tile count and score.
        """
        cells = self.cells.copy()
        cells.setflags(write=False)
        return Snapshot(cells=cells, tile_count=self.tile_count, score=self.score)

    def restore(self, snapshot: Snapshot) -> None:
        """
        Restore cells, tile count and score from a snapshot.

        The high score, the win flag and the continued flag are left as they are.
        """
        self.cells = snapshot.cells.copy()
        self.tile_count = snapshot.tile_count
        self.score = snapshot.score

    def reset(self) -> None:
        """Clear the board for a new game, keeping only the high score."""
        self.cells = zeros((self.size, self.size), dtype=int64)
        self.tile_count = 0
        self.score = 0
        self.has_won = False
        self.continued = False
