"""Exceptions raised by the state codec, notation and move generation."""


class TicTacError(Exception):
    """Base class for all tictac errors."""


class DecodeError(TicTacError, ValueError):
    """A cell code or text board could not be decoded."""


class InvalidStateError(TicTacError, ValueError):
    """A packed state violates the encoding invariants or is unreachable."""


class IllegalMoveError(TicTacError, ValueError):
    """A move targets an occupied or nonexistent cell."""
