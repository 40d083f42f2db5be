"""
Static evaluation of tic-tac-toe positions.

Scores are from X's point of view: positive favours X, negative favours O.
A score of 0 means "not decided yet", so no terminal position may score 0.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..core.bitboard import NUM_CELLS, TURN_BIT
from ..core.state import GameState


@dataclass(frozen=True)
class ScoreConfig:
    """Scoring constants."""
    win_score: int = 1000   # X win; an O win scores -win_score
    draw_score: int = -50   # Full board without a line
    ply_penalty: int = 10   # Shaping term, applied once per non-terminal level

    def __post_init__(self):
        if self.draw_score == 0:
            raise ValueError("draw_score must be non-zero (0 marks an undecided position)")
        if self.ply_penalty < 0:
            raise ValueError("ply_penalty must be non-negative")
        # Win > draw > loss must survive nine levels of shaping
        if self.win_score - NUM_CELLS * self.ply_penalty <= abs(self.draw_score):
            raise ValueError("win_score too small for draw_score and ply_penalty")


DEFAULT_SCORES = ScoreConfig()


class Evaluator:
    """Terminal scoring for the search."""

    def __init__(self, config: ScoreConfig = DEFAULT_SCORES):
        self.config = config

    def evaluate(self, state: GameState) -> int:
        """
        Score a position.

        A completed line belongs to the side that just moved, which is the
        opposite of the stored turn bit: X to move means O just won.
        """
        if state.has_winner():
            if state.bits & TURN_BIT:
                return -self.config.win_score
            return self.config.win_score

        if state.is_full():
            # Draws are disfavoured
            return self.config.draw_score

        return 0


_default_evaluator = Evaluator()


def evaluate(state: GameState) -> int:
    """Score a position with the default constants."""
    return _default_evaluator.evaluate(state)
