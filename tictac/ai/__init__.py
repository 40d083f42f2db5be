"""AI components: static evaluation and exhaustive minimax search."""

from .evaluator import Evaluator, ScoreConfig, evaluate
from .minimax import Minimax, MinimaxConfig, SearchResult, best_move, play_move
