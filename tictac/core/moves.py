"""
Move generation for tic-tac-toe.

A move is a cell index (0-8, row-major). Applying a move ORs the mover's
placement mask into the state, flips the turn bit and bumps the depth.
"""

from __future__ import annotations

from .bitboard import (
    NUM_CELLS, TURN_BIT, DEPTH_ONE,
    EMPTY_TEST, APPLY_MAX, APPLY_MIN, OCCUPANCY_MASK,
    cell_index, index_to_rowcol, is_valid_cell
)
from .errors import IllegalMoveError
from .state import GameState


def cell_to_algebraic(index: int) -> str:
    """Convert cell index to notation: column a-c, row 1-3 from the top ('a1' = 0)."""
    row, col = index_to_rowcol(index)
    return chr(ord('a') + col) + str(row + 1)


def algebraic_to_cell(s: str) -> int:
    """Parse cell notation such as 'b2'."""
    s = s.strip().lower()
    if len(s) != 2 or not s[1].isdigit():
        raise ValueError(f"Invalid cell format: {s}")
    col = ord(s[0]) - ord('a')
    row = int(s[1]) - 1
    if not is_valid_cell(row, col):
        raise ValueError(f"Cell off the board: {s}")
    return cell_index(row, col)


class MoveGenerator:
    """Generates legal moves and child states."""

    @staticmethod
    def get_legal_moves(state: GameState) -> list[int]:
        """Empty cells in ascending order."""
        bits = state.bits
        return [i for i in range(NUM_CELLS) if not bits & EMPTY_TEST[i]]

    @staticmethod
    def get_children(state: GameState) -> list[GameState]:
        """
        Expand a state into one child per empty cell, in cell order.

        The order matters: search keeps the first of equally scored children.
        Callers are expected not to expand terminal states.
        """
        bits = state.bits
        apply = APPLY_MAX if bits & TURN_BIT else APPLY_MIN
        base = (bits ^ TURN_BIT) + DEPTH_ONE

        children = []
        for i in range(NUM_CELLS):
            if not bits & EMPTY_TEST[i]:
                children.append(GameState(base | apply[i]))
        return children

    @staticmethod
    def apply_move(state: GameState, cell: int) -> GameState:
        """Play `cell` for the side to move and return the new state."""
        if not 0 <= cell < NUM_CELLS:
            raise IllegalMoveError(f"No such cell: {cell}")
        if state.is_occupied(cell):
            raise IllegalMoveError(f"Cell {cell_to_algebraic(cell)} is occupied")
        bits = state.bits
        apply = APPLY_MAX if bits & TURN_BIT else APPLY_MIN
        return GameState(((bits ^ TURN_BIT) + DEPTH_ONE) | apply[cell])

    @staticmethod
    def find_move(parent: GameState, child: GameState) -> int:
        """Return the cell filled between `parent` and `child`."""
        added = (child.bits & ~parent.bits) & OCCUPANCY_MASK
        for i in range(NUM_CELLS):
            if added == EMPTY_TEST[i]:
                return i
        raise IllegalMoveError("States do not differ by exactly one move")


# Convenience functions
def get_legal_moves(state: GameState) -> list[int]:
    """Get all legal moves for the side to move."""
    return MoveGenerator.get_legal_moves(state)


def get_children(state: GameState) -> list[GameState]:
    """Get all child states in cell order."""
    return MoveGenerator.get_children(state)


def apply_move(state: GameState, cell: int) -> GameState:
    """Apply a move, returning the new state."""
    return MoveGenerator.apply_move(state, cell)


def is_legal_move(state: GameState, cell: int) -> bool:
    """Check if a move is legal."""
    return cell in MoveGenerator.get_legal_moves(state)


def get_move_count(state: GameState) -> int:
    """Get number of legal moves."""
    return len(MoveGenerator.get_legal_moves(state))
