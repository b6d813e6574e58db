"""
Move utilities for the 2048 game: sliding and merging tiles in one of the four directions, and determining which
directions are legal.
"""

from collections.abc import Iterator
from typing import NamedTuple

from numpy import integer, ndarray, zeros

from gridmerge.core.gameboard import MAX_TILE, Board, mergeable_pairs
from gridmerge.core.history import Snapshot
from gridmerge.errors import InvalidDirection

# ##: All actions, with their integer codes.
ACTIONS = {'left': 0, 'up': 1, 'right': 2, 'down': 3}

# ##: Unit step (delta row, delta col) of each direction, rows growing downward.
DIRECTIONS = {'left': (0, -1), 'up': (-1, 0), 'right': (0, 1), 'down': (1, 0)}

_ACTION_NAMES = tuple(ACTIONS)


class MoveReport(NamedTuple):
    """
    Outcome of a move.

    Attributes
    ----------
    steps : int
        Number of unit steps executed by all tiles. A move is effective when this is greater than 0.
    snapshot : Snapshot | None
        Board state from before the move, when the move is eligible for undo.
    won : bool
        Whether the winning tile was reached for the first time during this move.
    """

    steps: int
    snapshot: Snapshot | None
    won: bool

    @property
    def effective(self) -> bool:
        return self.steps > 0


def resolve_direction(direction: str | int) -> str:
    """
    Normalize a direction given by name or integer code.

    Parameters
    ----------
    direction : str | int
        A direction name (case-insensitive) or an action code (0: left, 1: up, 2: right, 3: down).

    Returns
    -------
    str
        The lowercase direction name.

    Raises
    ------
    InvalidDirection
        If the direction is not one of the four known directions.
    """
    if isinstance(direction, str):
        name = direction.lower()
        if name in DIRECTIONS:
            return name
    elif isinstance(direction, (int, integer)) and not isinstance(direction, bool):
        if 0 <= direction < len(_ACTION_NAMES):
            return _ACTION_NAMES[direction]
    raise InvalidDirection(direction)


def _traversal(size: int, direction: str) -> Iterator[tuple[int, int]]:
    """
    Yield the cells of a board in the order they are resolved for a move.

    Each line is walked from the cell next to the target edge toward the far edge, so that a tile is always
    resolved before the tile behind it. The cell on the target edge never moves and is skipped.
    """
    if direction == 'left':
        for row in range(size):
            for col in range(1, size):
                yield row, col
    elif direction == 'right':
        for row in range(size):
            for col in range(size - 2, -1, -1):
                yield row, col
    elif direction == 'up':
        for col in range(size):
            for row in range(1, size):
                yield row, col
    else:
        for col in range(size):
            for row in range(size - 2, -1, -1):
                yield row, col


def _max_steps(size: int, row: int, col: int, direction: str) -> int:
    """Distance from a cell to the target edge, ignoring occupancy."""
    if direction == 'left':
        return col
    if direction == 'right':
        return size - 1 - col
    if direction == 'up':
        return row
    return size - 1 - row


def apply_move(board: Board, direction: str | int) -> MoveReport:
    """
    Slide and merge every tile of the board in a direction.

    Parameters
    ----------
    board : Board
        The board to update. **Modified in-place.**
    direction : str | int
        The direction to move in (see ``resolve_direction``).

    Returns
    -------
    MoveReport
        The number of steps executed, the undo snapshot and whether the move won the game.

    Raises
    ------
    InvalidDirection
        If the direction is unknown. The board is left untouched.

    Notes
    -----
    - A tile merges at most once per move, and a cell that received a merge cannot receive another one.
    - The snapshot is taken right before the first step, and only if the board had a mergeable pair at that
      point. A move starting from a board without mergeable pairs is never undoable.
    - The win flag is raised when a merge produces exactly the winning tile.
    - Two ``MAX_TILE`` tiles block each other instead of merging.
    """
    name = resolve_direction(direction)
    d_row, d_col = DIRECTIONS[name]
    cells = board.cells
    size = board.size

    merged = zeros((size, size), dtype=bool)
    snapshot = None
    steps = 0
    won = False

    for row, col in _traversal(size, name):
        value = int(cells[row, col])
        if value == 0:
            continue

        r1, c1 = row, col
        combined = False
        for _ in range(_max_steps(size, row, col, name)):
            r2, c2 = r1 + d_row, c1 + d_col
            target = int(cells[r2, c2])

            # ##: Blocked, or merge limit reached.
            if target not in (0, value) or merged[r2, c2] or combined:
                break
            if target == value and value == MAX_TILE:
                break

            # ##: First step of the move: keep the previous state for undo.
            if steps == 0 and board.count_mergeable_pairs() > 0:
                snapshot = board.snapshot()

            if target == value:
                value += value
                combined = True
                merged[r2, c2] = True
                board.tile_count -= 1
                board.add_score(value)

                if value == board.win_tile and not board.has_won:
                    board.has_won = True
                    won = True

            cells[r2, c2] = value
            cells[r1, c1] = 0
            steps += 1

            r1, c1 = r2, c2

    return MoveReport(steps=steps, snapshot=snapshot, won=won)


def _slides(source: ndarray, destination: ndarray) -> bool:
    """Check if some tile has an empty neighbour in the direction of the move."""
    return bool((source & ~destination).any())


def legal_actions_mask(cells: ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions in a single pass.

    Parameters
    ----------
    cells : ndarray
        The game board.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the move changes the board.
    """
    h_pairs, v_pairs = mergeable_pairs(cells)
    h_merge, v_merge = bool(h_pairs.any()), bool(v_pairs.any())
    occupied = cells != 0

    return (
        h_merge or _slides(occupied[:, 1:], occupied[:, :-1]),
        v_merge or _slides(occupied[1:, :], occupied[:-1, :]),
        h_merge or _slides(occupied[:, :-1], occupied[:, 1:]),
        v_merge or _slides(occupied[:-1, :], occupied[1:, :]),
    )


def legal_directions(cells: ndarray) -> list[str]:
    """
    Determine the directions that change the board.

    Parameters
    ----------
    cells : ndarray
        The game board.

    Returns
    -------
    list[str]
        Direction names, in action-code order.
    """
    mask = legal_actions_mask(cells)
    return [name for name, legal in zip(_ACTION_NAMES, mask) if legal]
