"""Tests for minimax search."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tictac.core.state import GameState, Mark
from tictac.core.moves import MoveGenerator, apply_move
from tictac.core.notation import parse_board
from tictac.core.bitboard import APPLY_MAX
from tictac.core.errors import InvalidStateError, DecodeError
from tictac.ai.evaluator import ScoreConfig, evaluate
from tictac.ai.minimax import (
    Minimax, MinimaxConfig, SearchResult, OPENING_BOOK, best_move, play_move
)

CORNERS_AND_CENTER = {0, 2, 4, 6, 8}


def chosen_cell(state: GameState, result: SearchResult) -> int:
    return MoveGenerator.find_move(state, result.best_child)


class TestMinimaxConfig:
    def test_default_config(self):
        config = MinimaxConfig()
        assert config.use_opening_book
        assert config.validate
        assert config.scores == ScoreConfig()

    def test_custom_config(self):
        config = MinimaxConfig(use_opening_book=False, scores=ScoreConfig(ply_penalty=1))
        assert not config.use_opening_book
        assert config.scores.ply_penalty == 1


class TestOpening:
    """Empty board: a corner-or-center reply, one ply deeper."""

    def test_x_opening(self):
        state = GameState.new_game()
        result = Minimax().search(state)
        cell = chosen_cell(state, result)
        assert cell in CORNERS_AND_CENTER
        assert result.best_child.cell(cell) == Mark.X
        assert result.best_child.depth == 1
        assert result.best_child.to_move == Mark.O
        assert result.from_book

    def test_o_opening(self):
        state = GameState.new_game(Mark.O)
        result = Minimax().search(state)
        cell = chosen_cell(state, result)
        assert cell in CORNERS_AND_CENTER
        assert result.best_child.cell(cell) == Mark.O
        assert result.best_child.to_move == Mark.X

    def test_book_entries_are_valid_replies(self):
        for root_bits, reply_bits in OPENING_BOOK.items():
            root = GameState(root_bits)
            reply = GameState(reply_bits)
            reply.validate()
            assert reply in MoveGenerator.get_children(root)

    def test_reply_to_center(self):
        # Against a center opening only a corner holds the draw
        state = parse_board("---\n-X-\n---")
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 0
        assert result.score == -50
        assert not result.from_book
        assert result.nodes > 0

    @pytest.mark.slow
    @pytest.mark.parametrize("to_move", [Mark.X, Mark.O])
    def test_book_matches_full_search(self, to_move):
        state = GameState.new_game(to_move)
        booked = Minimax().search(state)
        searched = Minimax(MinimaxConfig(use_opening_book=False)).search(state)
        assert searched.best_child == booked.best_child
        assert searched.score == booked.score
        assert searched.nodes == 549946


class TestWinningMove:
    def test_x_completes_row(self):
        state = parse_board("XX-\nOO-\n---")
        assert state.to_move == Mark.X
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 2
        assert evaluate(result.best_child) == 1000
        assert result.score == 990

    def test_o_completes_row(self):
        state = parse_board("XX-\nOO-\nX--")
        assert state.to_move == Mark.O
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 5
        assert evaluate(result.best_child) == -1000
        assert result.score == -990

    def test_best_move_function(self):
        reply = best_move(parse_board("XX-\nOO-\n---"))
        assert reply.get_winner() == Mark.X


class TestBlocking:
    def test_x_blocks(self):
        state = parse_board("O--\n-X-\nO--")
        assert state.to_move == Mark.X
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 3

    def test_o_blocks(self):
        state = parse_board("XX-\n-O-\n---")
        assert state.to_move == Mark.O
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 2

    def test_o_blocks_column(self):
        state = parse_board("X--\nXO-\n---")
        result = Minimax().search(state)
        assert chosen_cell(state, result) == 6


class TestTerminalRoot:
    def test_won_position(self):
        state = parse_board("XXX\nOO-\n---")
        result = Minimax().search(state)
        assert result.is_terminal
        assert result.best_child is None
        assert result.score == 1000
        assert result.nodes == 1

    def test_drawn_position(self):
        state = parse_board("XOX\nXOO\nOXX")
        result = Minimax().search(state)
        assert result.is_terminal
        assert result.score == -50

    def test_best_move_returns_input(self):
        state = parse_board("XOX\nXOO\nOXX")
        assert Minimax().best_move(state) is state

    def test_play_move_terminal(self):
        cell, result = play_move(parse_board("XXX\nOO-\n---"))
        assert cell is None
        assert result.is_terminal


class TestChosenMove:
    def test_searched_move(self):
        state = parse_board("XX-\nOO-\n---")
        result = Minimax().search(state)
        assert result.move == 2
        assert result.move == chosen_cell(state, result)

    def test_book_move(self):
        result = Minimax().search(GameState.new_game())
        assert result.from_book
        assert result.move == 0

    def test_terminal_has_no_move(self):
        result = Minimax().search(parse_board("XXX\nOO-\n---"))
        assert result.move is None

    def test_move_ignores_input_depth(self):
        state = parse_board("XO-\n-X-\n---")
        result = Minimax(MinimaxConfig(validate=False)).search(state.with_depth(12))
        assert result.move == chosen_cell(state, result)


class TestSearchBehaviour:
    def test_terminal_states_never_expanded(self, monkeypatch):
        original = MoveGenerator.get_children

        def guarded(state):
            assert not state.is_terminal(), "expanded a terminal state"
            return original(state)

        monkeypatch.setattr(MoveGenerator, "get_children", staticmethod(guarded))
        Minimax().search(parse_board("XO-\n---\n---"))

    def test_depth_reset(self):
        state = parse_board("XO-\n-X-\n---")
        engine = Minimax(MinimaxConfig(validate=False))
        a = engine.search(state)
        b = engine.search(state.with_depth(0))
        c = engine.search(state.with_depth(12))
        assert a.score == b.score == c.score
        assert chosen_cell(state, a) == chosen_cell(state, b) == chosen_cell(state, c)

    def test_reply_depth_advances_by_one(self):
        state = parse_board("XO-\n-X-\n---")
        reply = Minimax().best_move(state)
        assert reply.depth == state.depth + 1
        reply.validate()

    def test_deterministic(self):
        state = parse_board("X--\n-O-\n---")
        assert Minimax().search(state) == Minimax().search(state)

    def test_play_move(self):
        cell, result = play_move(parse_board("XX-\nOO-\n---"))
        assert cell == 2
        assert result.score == 990


class TestMarkSwapSymmetry:
    """Decided positions: swapping marks negates scores and keeps the move."""

    @pytest.mark.parametrize("board", [
        "XX-\nOO-\n---",
        "XO-\n---\n---",
        "-X-\nOXO\n---",
    ])
    def test_search_symmetry(self, board):
        state = parse_board(board)
        mirrored = state.swap_marks()
        engine = Minimax()
        result = engine.search(state)
        mirrored_result = engine.search(mirrored)
        assert abs(result.score) > 900
        assert mirrored_result.score == -result.score
        assert chosen_cell(state, result) == chosen_cell(mirrored, mirrored_result)
        assert mirrored_result.best_child == result.best_child.swap_marks()

    @pytest.mark.parametrize("board", ["XXX\nOO-\n---", "XX-\nOOO\nX--"])
    def test_evaluate_symmetry(self, board):
        state = parse_board(board)
        assert evaluate(state.swap_marks()) == -evaluate(state)


class TestValidation:
    def test_rejects_depth_mismatch(self):
        with pytest.raises(InvalidStateError):
            Minimax().search(GameState(APPLY_MAX[0] | 0x1))

    def test_rejects_invalid_code(self):
        with pytest.raises(DecodeError):
            Minimax().search(GameState(0x08060000))

    def test_rejects_double_win(self):
        with pytest.raises(InvalidStateError):
            Minimax().search(parse_board("XXX\nOOO\n---", to_move=Mark.X))

    def test_rejects_winner_to_move(self):
        with pytest.raises(InvalidStateError):
            Minimax().search(parse_board("XXX\nOO-\nO--"))

    def test_validation_can_be_disabled(self):
        # Raw board with depth left at 0
        state = GameState(APPLY_MAX[0] | 0x0)
        result = Minimax(MinimaxConfig(validate=False)).search(state)
        assert result.best_child is not None


class TestAnalyze:
    def test_all_moves_scored(self):
        state = parse_board("XX-\nOO-\n---")
        moves = Minimax().analyze(state)
        assert [m['move'] for m in moves][0] == 2
        assert moves[0]['algebraic'] == 'c1'
        assert moves[0]['score'] == 1000
        assert len(moves) == 5
        scores = [m['score'] for m in moves]
        assert scores == sorted(scores, reverse=True)

    def test_minimizer_sorted_ascending(self):
        state = parse_board("XX-\nOO-\nX--")
        moves = Minimax().analyze(state)
        assert moves[0]['move'] == 5
        scores = [m['score'] for m in moves]
        assert scores == sorted(scores)

    def test_top_k(self):
        moves = Minimax().analyze(parse_board("XX-\nOO-\n---"), top_k=2)
        assert len(moves) == 2

    def test_terminal(self):
        assert Minimax().analyze(parse_board("XXX\nOO-\n---")) == []

    def test_agrees_with_search(self):
        state = parse_board("X--\n-O-\n---")
        result = Minimax().search(state)
        moves = Minimax().analyze(state)
        assert moves[0]['state'] == result.best_child
        assert moves[0]['score'] - 10 == result.score


class TestPrincipalVariation:
    def test_perfect_play_draws(self):
        line = Minimax().principal_variation(GameState.new_game())
        assert len(line) == 9
        assert line[-1].is_full()
        assert line[-1].get_winner() is None

    def test_forced_win(self):
        line = Minimax().principal_variation(parse_board("XO-\n---\n---"))
        assert line[-1].get_winner() == Mark.X

    def test_each_step_is_one_move(self):
        state = parse_board("X--\n---\n---")
        line = Minimax().principal_variation(state)
        previous = state
        for step in line:
            assert step.depth == previous.depth + 1
            assert MoveGenerator.find_move(previous, step) in range(9)
            previous = step

    def test_terminal_start(self):
        assert Minimax().principal_variation(parse_board("XXX\nOO-\n---")) == []
