"""
Compact textual encoding of a board, as stored in a save file.

The grid is written row-major, one character per cell. An empty cell is ``'_'``; a tile of value ``2**e`` is the
character of code point ``e + 32``. Exponents range from 1 (``'!'``, a 2) to 62 (``'^'``, the largest power of two
an int64 cell holds), so tile characters never collide with the empty marker (code point 95).
"""

from dataclasses import dataclass

from numpy import array, int64, log2, ndarray, zeros_like

from gridmerge.core.gameboard import WIN_TILE, Board
from gridmerge.errors import CorruptRecord

EMPTY_CHAR = '_'
EXPONENT_OFFSET = 32
MIN_EXPONENT = 1
MAX_EXPONENT = 62


@dataclass(frozen=True)
class Record:
    """
    Persisted state of the board of one size.

    Attributes
    ----------
    size : int
        Side length of the board. Not stored in the record itself: it is given by the save it is read from.
    grid : str
        Encoded cells, ``size**2`` characters.
    high_score : int
        Best score reached on this board size.
    score : int
        Current score.
    number_count : int
        Number of tiles on the board.
    has_won : bool
        Whether the winning tile has been reached.
    continued : bool
        Whether the player kept playing after winning.
    """

    size: int
    grid: str
    high_score: int = 0
    score: int = 0
    number_count: int = 0
    has_won: bool = False
    continued: bool = False

    def to_dict(self) -> dict:
        """Serializable form of the record, with the keys of the save file."""
        return {
            'grid': self.grid,
            'highScore': self.high_score,
            'score': self.score,
            'numberCount': self.number_count,
            'hasWon': self.has_won,
            'gameContinued': self.continued,
        }

    @classmethod
    def from_dict(cls, data: dict, size: int) -> 'Record':
        """
        Parse and validate the content of a save file.

        Parameters
        ----------
        data : dict
            Decoded JSON object.
        size : int
            Side length of the board the save belongs to.

        Returns
        -------
        Record
            The validated record.

        Raises
        ------
        CorruptRecord
            If a field is missing, has the wrong type or is inconsistent with the grid.
        """
        if not isinstance(data, dict):
            raise CorruptRecord(f'expected a JSON object, got {type(data).__name__}')

        record = cls(
            size=size,
            grid=_field(data, 'grid', str),
            high_score=_counter(data, 'highScore'),
            score=_counter(data, 'score'),
            number_count=_counter(data, 'numberCount'),
            has_won=_field(data, 'hasWon', bool),
            continued=_field(data, 'gameContinued', bool),
        )

        cells = decode_grid(record.grid, size)
        if record.number_count != int((cells != 0).sum()):
            raise CorruptRecord(f'numberCount is {record.number_count} but the grid holds {(cells != 0).sum()} tiles')
        if record.score > record.high_score:
            raise CorruptRecord(f'score {record.score} exceeds highScore {record.high_score}')
        return record


def _field(data: dict, key: str, kind: type):
    if key not in data:
        raise CorruptRecord(f'missing field {key!r}')
    value = data[key]
    # ##: bool is an int subclass, keep them apart.
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise CorruptRecord(f'field {key!r} must be {kind.__name__}, got {value!r}')
    return value


def _counter(data: dict, key: str) -> int:
    value = _field(data, key, int)
    if value < 0:
        raise CorruptRecord(f'field {key!r} must be non-negative, got {value}')
    return value


def encode_grid(cells: ndarray) -> str:
    """
    Encode the cells of a board as a string.

    Parameters
    ----------
    cells : ndarray
        The game board, holding 0 or powers of two.

    Returns
    -------
    str
        One character per cell, row-major.

    Example
    -------
    >>> import numpy as np
    >>> encode_grid(np.array([[0, 2], [4, 2048]]))
    '_!"+'
    """
    obs = cells.ravel().astype('float64')
    obs = log2(obs, where=obs != 0, out=zeros_like(obs))
    exponents = obs.astype(int64, copy=False)
    return ''.join(EMPTY_CHAR if exponent == 0 else chr(exponent + EXPONENT_OFFSET) for exponent in exponents.tolist())


def decode_grid(grid: str, size: int) -> ndarray:
    """
    Decode a grid string back into cells.

    Parameters
    ----------
    grid : str
        Encoded cells, as produced by ``encode_grid``.
    size : int
        Side length of the board.

    Returns
    -------
    ndarray
        The cells, of shape (size, size).

    Raises
    ------
    CorruptRecord
        If the string does not hold ``size**2`` characters, or holds a character outside the tile range.
    """
    if len(grid) != size**2:
        raise CorruptRecord(f'grid must hold {size ** 2} cells, got {len(grid)}')

    values = []
    for char in grid:
        if char == EMPTY_CHAR:
            values.append(0)
            continue

        exponent = ord(char) - EXPONENT_OFFSET
        if not MIN_EXPONENT <= exponent <= MAX_EXPONENT:
            raise CorruptRecord(f'invalid tile character {char!r}')
        values.append(1 << exponent)

    return array(values, dtype=int64).reshape(size, size)


def encode(board: Board) -> Record:
    """Encode a board into a record."""
    return Record(
        size=board.size,
        grid=encode_grid(board.cells),
        high_score=board.high_score,
        score=board.score,
        number_count=board.tile_count,
        has_won=board.has_won,
        continued=board.continued,
    )


def decode(record: Record, win_tile: int = WIN_TILE) -> Board:
    """
    Decode a record into a board.

    Parameters
    ----------
    record : Record
        The record to decode.
    win_tile : int, optional
        Merge result that wins the game on the decoded board.

    Returns
    -------
    Board
        A board equal to the encoded one in cells, tile count, scores and flags.

    Raises
    ------
    CorruptRecord
        If the grid cannot be decoded or the scores are inconsistent.
    """
    cells = decode_grid(record.grid, record.size)
    try:
        return Board.from_cells(
            cells,
            score=record.score,
            high_score=record.high_score,
            has_won=record.has_won,
            continued=record.continued,
            win_tile=win_tile,
        )
    except ValueError as error:
        raise CorruptRecord(str(error)) from error


def empty_record(size: int) -> Record:
    """Record of a fresh board: no tiles, zero scores, flags cleared."""
    return Record(size=size, grid=EMPTY_CHAR * size**2)
