"""Core game logic: packed state, bitmask tables, and move generation."""

from .bitboard import *
from .errors import TicTacError, DecodeError, InvalidStateError, IllegalMoveError
from .state import GameState, Mark, encode_cell
from .moves import MoveGenerator
