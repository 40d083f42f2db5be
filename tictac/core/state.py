"""
Game state representation for tic-tac-toe.

A position is one packed 32-bit integer (see bitboard.py) wrapped in an
immutable value object. Moves never mutate a state; they return a new one.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence
import numpy as np

from .bitboard import (
    ROWS, COLS, NUM_CELLS,
    TURN_BIT, DEPTH_SHIFT, DEPTH_MASK, OCCUPANCY_SHIFT, OCCUPANCY_MASK,
    CELL_SHIFT, CELLS_MASK, STATE_MASK, FULL_MASK,
    EMPTY_CODE, MAX_CODE, MIN_CODE, INVALID_CODE,
    EMPTY_TEST, APPLY_MAX, APPLY_MIN, WIN_MASKS, MAX_WIN_MASKS, MIN_WIN_MASKS,
    MAX_CODES_MASK, MIN_CODES_MASK,
    cell_index, is_valid_cell, read_code, popcount, format_bits
)
from .errors import DecodeError, InvalidStateError


class Mark(IntEnum):
    """Cell contents, valued by their two-bit code."""
    EMPTY = EMPTY_CODE
    X = MAX_CODE  # maximizer
    O = MIN_CODE  # minimizer


_CODE_TO_MARK = {EMPTY_CODE: Mark.EMPTY, MAX_CODE: Mark.X, MIN_CODE: Mark.O}

# numpy board values
_MARK_TO_VALUE = {Mark.EMPTY: 0, Mark.X: 1, Mark.O: -1}
_VALUE_TO_MARK = {v: m for m, v in _MARK_TO_VALUE.items()}


def encode_cell(row: int, col: int, mark: Mark) -> int:
    """Return the state bits that place `mark` at (row, col). Pure table lookup."""
    if not is_valid_cell(row, col):
        raise ValueError(f"Cell ({row},{col}) is off the board")
    i = cell_index(row, col)
    if mark == Mark.X:
        return APPLY_MAX[i]
    if mark == Mark.O:
        return APPLY_MIN[i]
    return 0


@dataclass(frozen=True)
class GameState:
    """
    Immutable tic-tac-toe position.

    Attributes:
        bits: Packed state: depth, occupancy, cell codes and turn
              (default: empty board, X to move)
    """
    bits: int = TURN_BIT

    @classmethod
    def new_game(cls, to_move: Mark = Mark.X) -> GameState:
        """Create an empty board with `to_move` to play."""
        return cls(TURN_BIT if to_move == Mark.X else 0)

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[Mark]], to_move: Mark = Mark.X) -> GameState:
        """
        Encode a 3x3 grid of marks.

        Depth is set to the number of occupied cells so the result passes
        validate().
        """
        if len(grid) != ROWS or any(len(row) != COLS for row in grid):
            raise DecodeError(f"Expected a {ROWS}x{COLS} grid")

        bits = 0
        count = 0
        for row in range(ROWS):
            for col in range(COLS):
                try:
                    mark = Mark(grid[row][col])
                except ValueError as e:
                    raise DecodeError(f"Invalid mark at ({row},{col}): {grid[row][col]!r}") from e
                if mark != Mark.EMPTY:
                    bits |= encode_cell(row, col, mark)
                    count += 1

        bits |= count << DEPTH_SHIFT
        if to_move == Mark.X:
            bits |= TURN_BIT
        return cls(bits)

    @classmethod
    def from_array(cls, board: np.ndarray, to_move: Mark = Mark.X) -> GameState:
        """Encode a (3, 3) array holding 1 for X, -1 for O and 0 for empty."""
        board = np.asarray(board)
        if board.shape != (ROWS, COLS):
            raise DecodeError(f"Expected shape ({ROWS}, {COLS}), got {board.shape}")
        grid = []
        for row in board.tolist():
            try:
                grid.append([_VALUE_TO_MARK[v] for v in row])
            except KeyError as e:
                raise DecodeError(f"Invalid board value: {e.args[0]!r}") from e
        return cls.from_grid(grid, to_move)

    # --- Field accessors ---

    @property
    def depth(self) -> int:
        """Number of moves played (only meaningful as a search root marker)."""
        return (self.bits & DEPTH_MASK) >> DEPTH_SHIFT

    @property
    def occupancy(self) -> int:
        """Nine occupancy bits, cell 0 most significant."""
        return (self.bits & OCCUPANCY_MASK) >> OCCUPANCY_SHIFT

    @property
    def cells(self) -> int:
        """Eighteen cell-code bits, cell 0 most significant."""
        return (self.bits & CELLS_MASK) >> CELL_SHIFT

    @property
    def turn(self) -> int:
        """Raw turn bit: 1 = X to move, 0 = O to move."""
        return self.bits & TURN_BIT

    @property
    def to_move(self) -> Mark:
        return Mark.X if self.bits & TURN_BIT else Mark.O

    @property
    def occupied_count(self) -> int:
        return popcount(self.bits & OCCUPANCY_MASK)

    # --- Decoding ---

    def cell(self, index: int) -> Mark:
        """Mark at a cell index (0-8, row-major)."""
        code = read_code(self.bits, index)
        if code == INVALID_CODE:
            raise DecodeError(f"Invalid cell code 0b11 at cell {index}")
        return _CODE_TO_MARK[code]

    def to_grid(self) -> list[list[Mark]]:
        """Decode the board into rows of marks."""
        return [[self.cell(cell_index(row, col)) for col in range(COLS)]
                for row in range(ROWS)]

    def decode(self) -> tuple[list[list[Mark]], Mark]:
        """Decode into (grid, mark to move)."""
        return self.to_grid(), self.to_move

    def to_array(self) -> np.ndarray:
        """
        Convert to a (3, 3) int8 array.

        Values: 1 = X, -1 = O, 0 = empty.
        """
        board = np.zeros((ROWS, COLS), dtype=np.int8)
        for row, marks in enumerate(self.to_grid()):
            for col, mark in enumerate(marks):
                board[row, col] = _MARK_TO_VALUE[mark]
        return board

    # --- Predicates ---

    def is_occupied(self, index: int) -> bool:
        mask = EMPTY_TEST[index]
        return (self.bits & mask) == mask

    def is_full(self) -> bool:
        return (self.bits & FULL_MASK) == FULL_MASK

    def has_winner(self) -> bool:
        """True if any line is held by either mark."""
        bits = self.bits
        for mask in WIN_MASKS:
            if (bits & mask) == mask:
                return True
        return False

    def get_winner(self) -> Optional[Mark]:
        """Return the mark holding a completed line, or None."""
        bits = self.bits
        for mask in MAX_WIN_MASKS:
            if (bits & mask) == mask:
                return Mark.X
        for mask in MIN_WIN_MASKS:
            if (bits & mask) == mask:
                return Mark.O
        return None

    def is_terminal(self) -> bool:
        """Check if game is over (won or board full)."""
        return self.has_winner() or self.is_full()

    def empty_cells(self) -> list[int]:
        """Indices of empty cells in ascending order."""
        return [i for i in range(NUM_CELLS) if not self.is_occupied(i)]

    # --- Derived states ---

    def with_depth(self, depth: int) -> GameState:
        if not 0 <= depth <= DEPTH_MASK >> DEPTH_SHIFT:
            raise ValueError(f"Depth out of range: {depth}")
        return GameState((self.bits & ~DEPTH_MASK & STATE_MASK) | (depth << DEPTH_SHIFT))

    def with_turn(self, to_move: Mark) -> GameState:
        if to_move == Mark.X:
            return GameState(self.bits | TURN_BIT)
        return GameState(self.bits & ~TURN_BIT & STATE_MASK)

    def swap_marks(self) -> GameState:
        """Exchange X and O everywhere, including the side to move."""
        bits = self.bits
        x_codes = bits & MAX_CODES_MASK
        o_codes = bits & MIN_CODES_MASK
        rest = bits & ~CELLS_MASK & STATE_MASK
        return GameState((rest | (x_codes >> 1) | (o_codes << 1)) ^ TURN_BIT)

    # --- Validation ---

    def validate(self) -> None:
        """
        Check the encoding invariants.

        Raises DecodeError for a 0b11 cell code and InvalidStateError when
        occupancy disagrees with the cell codes, depth is not the occupied
        count, both marks hold a line, or the side to move
        already holds one.
        """
        if not 0 <= self.bits <= STATE_MASK:
            raise InvalidStateError(f"State does not fit in 32 bits: {self.bits:#x}")

        for i in range(NUM_CELLS):
            mark = self.cell(i)
            if (mark != Mark.EMPTY) != self.is_occupied(i):
                raise InvalidStateError(f"Occupancy bit of cell {i} disagrees with its code")

        if self.depth > NUM_CELLS:
            raise InvalidStateError(f"Depth {self.depth} exceeds board size")
        if self.depth != self.occupied_count:
            raise InvalidStateError(
                f"Depth {self.depth} does not match {self.occupied_count} occupied cells"
            )

        bits = self.bits
        x_won = any((bits & mask) == mask for mask in MAX_WIN_MASKS)
        o_won = any((bits & mask) == mask for mask in MIN_WIN_MASKS)
        if x_won and o_won:
            raise InvalidStateError("Both marks hold a completed line")
        if (x_won and self.to_move == Mark.X) or (o_won and self.to_move == Mark.O):
            raise InvalidStateError(
                f"{self.to_move.name} holds a completed line but is still to move"
            )

    def __repr__(self) -> str:
        """Pretty print the board."""
        symbols = {Mark.EMPTY: '-', Mark.X: 'X', Mark.O: 'O'}
        lines = [f"GameState({self.bits:#010x})", format_bits(self.bits)]
        for row in range(ROWS):
            line = ""
            for col in range(COLS):
                code = read_code(self.bits, cell_index(row, col))
                line += symbols[_CODE_TO_MARK[code]] if code != INVALID_CODE else '?'
            lines.append(line)
        lines.append(f"{self.to_move.name} to move (depth {self.depth})")
        return "\n".join(lines)
