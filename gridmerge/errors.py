"""Exceptions raised by the grid engine."""


class GridMergeError(Exception):
    """Base class for every error raised by the engine."""


class InvalidDirection(GridMergeError, ValueError):
    """A move was requested in a direction other than left, up, right or down."""

    def __init__(self, direction: object):
        super().__init__(f'Invalid direction: {direction!r}')
        self.direction = direction


class InvalidSize(GridMergeError, ValueError):
    """A board size smaller than 2 was requested."""

    def __init__(self, size: object):
        super().__init__(f'Grid size cannot be less than 2, got {size!r}')
        self.size = size


class CorruptRecord(GridMergeError):
    """A persisted record could not be decoded."""


class GameNotStarted(GridMergeError, RuntimeError):
    """An operation needing a board was called before the game was started."""
