"""2048 game session: a board with its undo history, spawning and persistence."""

import logging
from enum import Enum

from numpy import ndarray
from numpy.random import Generator

from gridmerge.config import MIN_SIZE, GameConfig
from gridmerge.core.gameboard import Board
from gridmerge.core.gamemove import MoveReport, apply_move, resolve_direction
from gridmerge.core.history import UndoHistory
from gridmerge.core.spawner import Spawner
from gridmerge.errors import GameNotStarted, InvalidSize
from gridmerge.utils.codec import decode, encode
from gridmerge.utils.storage import GameStorage

_logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    """
    Lifecycle of a session.

    UNINITIALIZED: no game started yet.
    READY: waiting for a move.
    WON: the winning tile was reached and the player has not chosen to continue.
    LOST: the board is full and no tile can merge.
    """

    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    WON = 'won'
    LOST = 'lost'


class GameSession:
    """
    2048 game session.

    This class owns the board of the current size and drives it: it loads or creates the board, applies moves,
    spawns tiles, keeps the undo history and persists the board after every change.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        storage: GameStorage | None = None,
        rng: Generator | int | None = None,
    ):
        """
        Initialize the session. No board is loaded until ``start_game`` is called.

        Parameters
        ----------
        config : GameConfig, optional
            Game configuration (default is ``GameConfig()``).
        storage : GameStorage, optional
            Where boards are saved (default is a storage on ``config.save_dir``).
        rng : Generator | int | None, optional
            Random source of the spawner, or a seed to build one.
        """
        self.config = config or GameConfig()
        self._storage = storage or GameStorage(self.config.save_dir)
        self._spawner = Spawner(rng, self.config.spawn_probs)
        self._history = UndoHistory(self.config.undo_limit)
        self._board: Board | None = None

    # ##: Read accessors.

    @property
    def board(self) -> Board:
        if self._board is None:
            raise GameNotStarted('No game has been started')
        return self._board

    @property
    def size(self) -> int:
        return self.board.size

    @property
    def score(self) -> int:
        return self.board.score

    @property
    def high_score(self) -> int:
        return self.board.high_score

    @property
    def tile_count(self) -> int:
        return self.board.tile_count

    @property
    def has_won(self) -> bool:
        return self.board.has_won

    @property
    def continued(self) -> bool:
        return self.board.continued

    @property
    def cells(self) -> ndarray:
        """Copy of the current grid, for rendering."""
        return self.board.cells.copy()

    def get(self, row: int, col: int) -> int:
        return self.board.get(row, col)

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    @property
    def status(self) -> GameStatus:
        """
        Current state of the game.

        Returns
        -------
        GameStatus
            LOST when no move is left, WON when the winning tile was reached and the player has not continued,
            READY otherwise.
        """
        if self._board is None:
            return GameStatus.UNINITIALIZED
        if self._board.is_done():
            return GameStatus.LOST
        if self._board.has_won and not self._board.continued:
            return GameStatus.WON
        return GameStatus.READY

    # ##: Operations.

    def start_game(self, size: int | None = None) -> Board:
        """
        Load the board of a size, or create it.

        Parameters
        ----------
        size : int, optional
            Side length of the board (default is the current size, or ``config.size`` before the first game).

        Returns
        -------
        Board
            The active board.

        Raises
        ------
        InvalidSize
            If the size is smaller than 2. The session is left untouched.

        Notes
        -----
        - Switching to another size saves the current board first.
        - A loaded board without tiles gets its initial tiles and is saved right away.
        - The undo history always starts empty.
        """
        size = self._target_size(size)

        if self._board is not None and self._board.size != size:
            self.save()

        self._board = decode(self._storage.load(size), win_tile=self.config.win_tile)
        self._history.clear()

        if self._board.tile_count == 0:
            for _ in range(self.config.initial_tiles):
                self._spawner.spawn(self._board)
            self.save()

        _logger.info('Started a %dx%d game (score %d)', size, size, self._board.score)
        return self._board

    def restart_game(self, size: int | None = None) -> Board:
        """
        Clear the current board and start a game.

        Parameters
        ----------
        size : int, optional
            Side length of the board to start (default is the current size).

        Returns
        -------
        Board
            The active board.

        Raises
        ------
        InvalidSize
            If the size is smaller than 2. The session is left untouched.

        Notes
        -----
        The board being cleared is the current one; its high score is kept. When another size is requested, that
        size's save is then loaded as it is.
        """
        size = self._target_size(size)

        if self._board is None:
            self._board = decode(self._storage.load(size), win_tile=self.config.win_tile)

        _logger.info('Restarting the %dx%d game', self._board.size, self._board.size)
        self._board.reset()
        self.save()
        return self.start_game(size)

    def move(self, direction: str | int) -> MoveReport:
        """
        Apply a move.

        Parameters
        ----------
        direction : str | int
            Direction to move in: left, up, right or down, by name or action code.

        Returns
        -------
        MoveReport
            The outcome of the move.

        Raises
        ------
        InvalidDirection
            If the direction is unknown. The board is left untouched.

        Notes
        -----
        - A move that changes nothing is a no-op: no tile is spawned and nothing is saved.
        - An effective move may push an undo snapshot, then spawns one tile and saves the board.
        """
        board = self.board
        name = resolve_direction(direction)
        report = apply_move(board, name)

        if not report.effective:
            _logger.debug('Move %s changed nothing', name)
            return report

        if report.snapshot is not None:
            self._history.push(report.snapshot)
        self._spawner.spawn(board)

        _logger.debug('Moved %s: %d steps, score %d', name, report.steps, board.score)
        if report.won:
            _logger.info('Reached %d with a score of %d', board.win_tile, board.score)
        if board.is_done():
            _logger.info('Game over with a score of %d', board.score)

        self.save()
        return report

    def undo(self) -> bool:
        """
        Restore the board from before the last undoable move.

        Returns
        -------
        bool
            True if a move was undone, False when the history is empty.

        Notes
        -----
        Only the cells, the tile count and the score are restored. The high score and the win flags stay.
        """
        board = self.board
        snapshot = self._history.pop()
        if snapshot is None:
            return False

        board.restore(snapshot)
        self.save()
        _logger.debug('Undid a move, score back to %d', board.score)
        return True

    def continue_game(self) -> None:
        """Keep playing after reaching the winning tile."""
        board = self.board
        if not board.has_won or board.continued:
            return

        board.continued = True
        self.save()
        _logger.info('Continuing after the win')

    def save(self) -> None:
        """Persist the current board."""
        self._storage.save(encode(self.board))

    def _target_size(self, size: int | None) -> int:
        if size is None:
            return self.config.size if self._board is None else self._board.size
        if size < MIN_SIZE:
            raise InvalidSize(size)
        return size

    def render(self) -> None:
        """Print the board, one tab-separated row per line, with empty cells as dots."""
        for row in range(self.size):
            print('\t'.join(str(self.get(row, col) or '.') for col in range(self.size)))
