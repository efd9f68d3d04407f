import logging
import time
from typing import List, Optional, Tuple

from chessai.config import CONFIG
from chessai.core.board import Color, GameState, Square
from chessai.core.evaluator import Evaluator
from chessai.core.executor import apply_move, undo_move
from chessai.core.rules import is_king_in_check, iter_legal_moves
from chessai.core.status import current_status
from chessai.core.utils import format_info

logger = logging.getLogger(__name__)

MoveTuple = Tuple[Square, Square]


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None):
        """
        evaluator.evaluate(state) must return a score from light's point of view.
        depth = search depth in plies (half-moves); defaults to the configured difficulty.
        """
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth or CONFIG.search.depth_for()
        self.nodes = 0
        self.last_score: Optional[float] = None

    def generate_all_legal_moves(self, state: GameState) -> List[MoveTuple]:
        return list(iter_legal_moves(state))

    def search(self, state: GameState, depth: int, alpha: float, beta: float, maximizing: bool) -> float:
        """Minimax with alpha-beta. The state is left exactly as it was found."""
        self.nodes += 1
        if depth <= 0 or current_status(state).is_terminal:
            return self.evaluator.evaluate(state)

        moves = self.generate_all_legal_moves(state)
        if not moves:
            # reached without a recorded status, e.g. a position loaded from FEN
            if is_king_in_check(state, state.side_to_move):
                mate = self.evaluator.cfg.mate_score
                return -mate if state.side_to_move is Color.LIGHT else mate
            return 0.0

        if maximizing:
            value = -float("inf")
            for from_sq, to_sq in moves:
                apply_move(state, from_sq, to_sq)
                try:
                    value = max(value, self.search(state, depth - 1, alpha, beta, False))
                finally:
                    undo_move(state)
                alpha = max(alpha, value)
                if alpha >= beta:
                    break
            return value

        value = float("inf")
        for from_sq, to_sq in moves:
            apply_move(state, from_sq, to_sq)
            try:
                value = min(value, self.search(state, depth - 1, alpha, beta, True))
            finally:
                undo_move(state)
            beta = min(beta, value)
            if alpha >= beta:
                break
        return value

    def get_best_move(self, state: GameState) -> Optional[MoveTuple]:
        """Best (from, to) for the side to move, or None when it has no legal move.

        Light maximizes, dark minimizes. Each root move is searched with the
        full window; ties keep the earliest generated move.
        """
        self.nodes = 0
        self.last_score = None
        start_time = time.time()

        maximizing = state.side_to_move is Color.LIGHT
        window = CONFIG.search.root_window
        best_move = None
        best_value = -float("inf") if maximizing else float("inf")

        for from_sq, to_sq in self.generate_all_legal_moves(state):
            apply_move(state, from_sq, to_sq)
            try:
                value = self.search(state, self.max_depth - 1, -window, window, not maximizing)
            finally:
                undo_move(state)

            if (maximizing and value > best_value) or (not maximizing and value < best_value):
                best_value = value
                best_move = (from_sq, to_sq)

        if best_move is not None:
            self.last_score = best_value
        elapsed = (time.time() - start_time) * 1000
        logger.info(format_info(self.max_depth, best_value if best_move else 0.0,
                                self.nodes, elapsed, best_move))
        return best_move


def best_move(state: GameState, difficulty: Optional[str] = None) -> Optional[Tuple[int, int, int, int]]:
    """AI entry point: (from_row, from_col, to_row, to_col) for the side to move, or None."""
    engine = SearchEngine(depth=CONFIG.search.depth_for(difficulty))
    move = engine.get_best_move(state)
    if move is None:
        return None
    (fr, fc), (tr, tc) = move
    return fr, fc, tr, tc
