"""
tictac - optimal tic-tac-toe moves by exhaustive minimax over a packed state.

Quick Start:
    from tictac import parse_board, best_move, format_result

    state = parse_board("X-O\\n-X-\\n---")
    print(format_result(best_move(state)))

Modules:
    core  - packed state, bitmask tables, move generation, text notation
    ai    - evaluation and minimax search
    cli   - command-line entry point
"""

from tictac.core.state import GameState, Mark
from tictac.core.errors import TicTacError, DecodeError, InvalidStateError, IllegalMoveError
from tictac.core.notation import parse_board, format_board, format_result
from tictac.ai.minimax import Minimax, MinimaxConfig, SearchResult, best_move, play_move
from tictac.ai.evaluator import evaluate

__version__ = "1.0.0"

__all__ = [
    # State
    "GameState",
    "Mark",
    # Notation
    "parse_board",
    "format_board",
    "format_result",
    # Search
    "Minimax",
    "MinimaxConfig",
    "SearchResult",
    "best_move",
    "play_move",
    "evaluate",
    # Errors
    "TicTacError",
    "DecodeError",
    "InvalidStateError",
    "IllegalMoveError",
]
