"""
Text notation for tic-tac-toe boards.

A board is three rows of three characters, top row first:

    X-O
    -X-
    --O

'-' is an empty cell. Rows are separated by whitespace (normally one per
line). The engine's reply is printed with a header naming the side to move:

    Player: X
    X-O
    -X-
    O-O
"""

from __future__ import annotations
from typing import Optional, Sequence

from .bitboard import ROWS, COLS
from .errors import DecodeError, InvalidStateError
from .state import GameState, Mark

SYMBOLS = {Mark.EMPTY: '-', Mark.X: 'X', Mark.O: 'O'}
_CHAR_TO_MARK = {symbol: mark for mark, symbol in SYMBOLS.items()}


def infer_to_move(grid: Sequence[Sequence[Mark]]) -> Mark:
    """
    Work out whose move it is from the mark counts.

    Equal counts: X to move. One side ahead by one: the other side to move.
    """
    x_count = sum(row.count(Mark.X) for row in grid)
    o_count = sum(row.count(Mark.O) for row in grid)
    diff = x_count - o_count
    if diff == 0 or diff == -1:
        return Mark.X
    if diff == 1:
        return Mark.O
    raise InvalidStateError(f"Unreachable position: {x_count} X against {o_count} O")


def parse_grid(text: str) -> list[list[Mark]]:
    """Parse board text into rows of marks."""
    rows = text.split()
    if len(rows) != ROWS:
        raise DecodeError(f"Expected {ROWS} rows, got {len(rows)}")

    grid = []
    for r, line in enumerate(rows):
        if len(line) != COLS:
            raise DecodeError(f"Row {r + 1} has {len(line)} cells, expected {COLS}: {line!r}")
        row = []
        for c, ch in enumerate(line):
            mark = _CHAR_TO_MARK.get(ch)
            if mark is None:
                raise DecodeError(f"Invalid character {ch!r} at row {r + 1}, column {c + 1}")
            row.append(mark)
        grid.append(row)
    return grid


def parse_board(text: str, to_move: Optional[Mark] = None) -> GameState:
    """
    Parse board text into a GameState.

    If `to_move` is None it is inferred from the mark counts.
    """
    grid = parse_grid(text)
    if to_move is None:
        to_move = infer_to_move(grid)
    return GameState.from_grid(grid, to_move)


def format_board(state: GameState) -> str:
    """Format the board as three lines of symbols."""
    return "\n".join("".join(SYMBOLS[mark] for mark in row) for row in state.to_grid())


def format_result(state: GameState) -> str:
    """Format the board with a header naming the side to move."""
    return f"Player: {SYMBOLS[state.to_move]}\n{format_board(state)}"
