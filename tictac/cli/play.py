#!/usr/bin/env python3
"""
Terminal tic-tac-toe solver.

Reads a board from standard input and prints the board after the engine's
best move. The side to move is inferred from the mark counts.

Example:
    $ printf 'XX-\\nOO-\\n---\\n' | tictac
    Player: O
    XXX
    OO-
    ---
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Optional, TextIO

from tictac.core.errors import TicTacError
from tictac.core.moves import cell_to_algebraic
from tictac.core.notation import parse_board, format_result
from tictac.core.state import GameState
from tictac.ai.minimax import Minimax

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "TICTAC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging on stderr, leaving stdout for the board."""
    level = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    # Unknown names fall back to the default
    if not isinstance(logging.getLevelName(level), int):
        level = "WARNING"
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def read_board(stream: TextIO) -> GameState:
    """Read a board from a text stream."""
    return parse_board(stream.read())


def solve(state: GameState, engine: Optional[Minimax] = None) -> GameState:
    """Return the position after the engine's reply."""
    engine = engine or Minimax()
    result = engine.search(state)

    if result.best_child is None:
        logger.info("Game already over (score %d)", result.score)
        return state

    move = result.move
    logger.info(
        "%s plays %s (score %d, %d nodes%s)",
        state.to_move.name,
        cell_to_algebraic(move),
        result.score,
        result.nodes,
        ", book" if result.from_book else "",
    )
    return result.best_child


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Read a tic-tac-toe board from stdin and print the best reply. "
                    "Board: three rows of '-', 'X' and 'O'.",
    )
    parser.parse_args(argv)

    setup_logging()

    try:
        state = read_board(sys.stdin)
        reply = solve(state)
    except TicTacError as e:
        logger.debug("Rejected input", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_result(reply))
    return 0


if __name__ == '__main__':
    sys.exit(main())
