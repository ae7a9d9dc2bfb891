from __future__ import annotations


class DynamazeError(Exception):
    """Base class for rule violations raised by the board core."""


class TooManyPlayersError(DynamazeError, ValueError):
    """A board seats at most four players, one per corner."""


class BoardShapeError(DynamazeError, ValueError):
    """Board sides must be odd and at least 5 so every edge has insertion lanes."""


class OutOfBoundsError(DynamazeError, IndexError):
    """A coordinate outside the grid was passed where an in-bounds one is required."""


class InvalidInsertionError(DynamazeError, ValueError):
    """An insertion slot that does not address an odd, non-corner lane, or bad timing."""


class IllegalMoveError(DynamazeError, ValueError):
    """A token move to a cell that is not reachable, or made out of turn."""


class DuplicatePlayerError(DynamazeError, ValueError):
    """Each player id may hold only one token."""
