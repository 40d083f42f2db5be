"""
Exhaustive minimax search for tic-tac-toe.

No pruning and no caching: the whole game tree below the empty board is
549,946 nodes, small enough to walk on every call. The two empty-board
positions are answered from a precomputed opening book instead.

X maximizes, O minimizes. Each non-terminal level shifts its score by the
ply penalty toward the opponent (max subtracts, min adds). Among equally
scored children the first in cell order is kept.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import logging
import time

from ..core.bitboard import NUM_CELLS, TURN_BIT, DEPTH_MASK, DEPTH_SHIFT
from ..core.moves import MoveGenerator, cell_to_algebraic
from ..core.state import GameState
from .evaluator import Evaluator, ScoreConfig

logger = logging.getLogger(__name__)

MAX_DEPTH_VALUE = DEPTH_MASK >> DEPTH_SHIFT

# Empty board -> reply. Every first move draws, so search keeps cell a1.
OPENING_BOOK: dict[int, int] = {
    0x00000001: 0x18040000,  # X to move: X on a1, O to move, depth 1
    0x00000000: 0x18020001,  # O to move: O on a1, X to move, depth 1
}


@dataclass
class MinimaxConfig:
    """Configuration for minimax search."""
    scores: ScoreConfig = field(default_factory=ScoreConfig)
    use_opening_book: bool = True  # Answer the empty board without searching
    validate: bool = True  # Check the root state's invariants before searching


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        score: Shaped minimax score of the root (positive favours X)
        best_child: State after the chosen move, or None if the root is terminal
        nodes: Number of positions visited
        from_book: True if the reply came from the opening book
        move: Cell index of the chosen move, or None if the root is terminal
    """
    score: int
    best_child: Optional[GameState]
    nodes: int = 0
    from_book: bool = False
    move: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.best_child is None


class Minimax:
    """Full-depth minimax search over packed states."""

    def __init__(self, config: Optional[MinimaxConfig] = None):
        self.config = config or MinimaxConfig()
        self.evaluator = Evaluator(self.config.scores)
        self.nodes_searched = 0

    def evaluate(self, state: GameState) -> int:
        return self.evaluator.evaluate(state)

    def search(self, state: GameState) -> SearchResult:
        """
        Search a position and return its score and best reply.

        The input is validated once (if enabled) and its depth is reset so it
        is always treated as a fresh root. The reply carries the input's
        depth plus one.
        """
        if self.config.validate:
            state.validate()

        root = state.with_depth(0)
        self.nodes_searched = 0

        if self.config.use_opening_book and root.bits in OPENING_BOOK:
            reply = GameState(OPENING_BOOK[root.bits])
            logger.debug("Opening book reply for %#010x: %#010x", root.bits, reply.bits)
            return SearchResult(
                score=self._book_score(root),
                best_child=self._restamp(reply, state.depth),
                nodes=0,
                from_book=True,
                move=MoveGenerator.find_move(root, reply),
            )

        start_time = time.time()
        score, best_child = self._search_root(root)
        elapsed = time.time() - start_time

        logger.debug(
            "Searched %d nodes in %.3fs, score %d", self.nodes_searched, elapsed, score
        )

        if best_child is None:
            return SearchResult(score=score, best_child=None, nodes=self.nodes_searched)
        return SearchResult(
            score=score,
            best_child=self._restamp(best_child, state.depth),
            nodes=self.nodes_searched,
            move=MoveGenerator.find_move(root, best_child),
        )

    def best_move(self, state: GameState) -> GameState:
        """Return the state after the best move, or `state` itself if the game is over."""
        result = self.search(state)
        if result.best_child is None:
            return state
        return result.best_child

    def analyze(self, state: GameState, top_k: int = NUM_CELLS) -> list[dict]:
        """
        Score every legal move.

        Returns up to `top_k` moves, best first for the side to move. Scores
        are the children's own minimax scores, before the root's shaping term.
        """
        if self.config.validate:
            state.validate()

        root = state.with_depth(0)
        if self.evaluate(root) != 0:
            return []

        self.nodes_searched = 0
        moves = []
        for cell in MoveGenerator.get_legal_moves(root):
            child = MoveGenerator.apply_move(root, cell)
            moves.append({
                'move': cell,
                'algebraic': cell_to_algebraic(cell),
                'score': self._score(child),
                'state': self._restamp(child, state.depth),
            })

        # Stable sort keeps cell order among equal scores
        maximizing = bool(root.bits & TURN_BIT)
        moves.sort(key=lambda m: m['score'], reverse=maximizing)
        return moves[:top_k]

    def principal_variation(self, state: GameState) -> list[GameState]:
        """Play best moves for both sides until the game ends."""
        line = []
        current = state
        while self.evaluate(current) == 0:
            current = self.best_move(current)
            line.append(current)
        return line

    def _search_root(self, root: GameState) -> tuple[int, Optional[GameState]]:
        """Score the root and keep the first child reaching the best score."""
        self.nodes_searched += 1
        score = self.evaluate(root)
        if score != 0:
            return score, None

        maximizing = root.bits & TURN_BIT
        best_score = None
        best_child = None

        for child in MoveGenerator.get_children(root):
            child_score = self._score(child)
            if best_score is None:
                better = True
            elif maximizing:
                better = child_score > best_score
            else:
                better = child_score < best_score
            if better:
                best_score = child_score
                best_child = child

        penalty = self.config.scores.ply_penalty
        if maximizing:
            return best_score - penalty, best_child
        return best_score + penalty, best_child

    def _score(self, state: GameState) -> int:
        """Minimax score of a non-root node."""
        self.nodes_searched += 1
        score = self.evaluate(state)
        if score != 0:
            return score

        children = MoveGenerator.get_children(state)
        penalty = self.config.scores.ply_penalty

        if state.bits & TURN_BIT:
            return max(self._score(child) for child in children) - penalty
        return min(self._score(child) for child in children) + penalty

    def _book_score(self, root: GameState) -> int:
        # Every reply draws; the alternating shaping terms below the root cancel
        scores = self.config.scores
        if root.bits & TURN_BIT:
            return scores.draw_score - scores.ply_penalty
        return scores.draw_score + scores.ply_penalty

    @staticmethod
    def _restamp(child: GameState, parent_depth: int) -> GameState:
        return child.with_depth(min(parent_depth + 1, MAX_DEPTH_VALUE))


def best_move(state: GameState, config: Optional[MinimaxConfig] = None) -> GameState:
    """Return the state after the best move for the side to move."""
    return Minimax(config).best_move(state)


def play_move(
    state: GameState,
    config: Optional[MinimaxConfig] = None
) -> tuple[Optional[int], SearchResult]:
    """
    Pick a move with minimax.

    Returns (cell, result); cell is None when the game is already over.
    """
    result = Minimax(config).search(state)
    return result.move, result
