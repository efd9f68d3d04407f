"""Game facade: the surface a front end talks to.

Wraps a single GameState and exposes move application, undo, queries for
drawing the board and the AI entry point. Everything is in-process and
synchronous; failed requests return False/None and leave the game untouched.
"""

import logging
from typing import List, Optional, Tuple

from chessai.config import CONFIG
from chessai.core.board import Color, GameState, Move, Piece, PieceType
from chessai.core.executor import apply_move, undo_move
from chessai.core.fen import from_fen, to_fen
from chessai.core.interop import export_pgn
from chessai.core.rules import is_king_in_check, iter_legal_moves, legal_destinations
from chessai.core.search import best_move
from chessai.core.status import (
    GameStatus, current_status, is_game_over, status_description, winner,
)
from chessai.core.utils import parse_uci, square_name

logger = logging.getLogger(__name__)


class Game:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.state = from_fen(fen) if fen else GameState()

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(fen=fen)

    def reset(self):
        """Reset to the initial position."""
        self.state.reset()

    # ── Mutation ───────────────────────────────────────────────────────────

    def apply_move(self, from_row: int, from_col: int, to_row: int, to_col: int,
                   promotion: Optional[PieceType] = None) -> bool:
        ok = apply_move(self.state, (from_row, from_col), (to_row, to_col), promotion)
        if ok:
            move = self.state.last_move()
            logger.debug("%s played %s -> %s", move.piece.color.label, move.san,
                         move.status.value)
        return ok

    def make_move(self, move_str: str) -> bool:
        """Play a coordinate move (e.g. 'e2e4', 'e7e8n'). Returns True if legal."""
        parsed = parse_uci(move_str or "")
        if parsed is None:
            return False
        (fr, fc), (tr, tc), letter = parsed
        promotion = PieceType.from_letter(letter) if letter else None
        return self.apply_move(fr, fc, tr, tc, promotion)

    def undo(self) -> bool:
        """Take back the last move; False when there is none."""
        return undo_move(self.state)

    # ── Queries ────────────────────────────────────────────────────────────

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.state.board.get((row, col))

    @property
    def side_to_move(self) -> Color:
        return self.state.side_to_move

    def is_in_check(self, side: Color) -> bool:
        return is_king_in_check(self.state, side)

    @property
    def status(self) -> GameStatus:
        return current_status(self.state)

    @property
    def is_game_over(self) -> bool:
        return is_game_over(self.state)

    @property
    def winner(self) -> Optional[Color]:
        return winner(self.state)

    def status_description(self) -> str:
        return status_description(self.state)

    def last_move(self) -> Optional[Move]:
        return self.state.last_move()

    @property
    def move_history(self) -> List[str]:
        return [m.san for m in self.state.history]

    @property
    def captured_pieces(self):
        return self.state.captured

    def legal_destinations(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Squares the piece on (row, col) may move to; empty if it is not its turn."""
        piece = self.piece_at(row, col)
        if piece is None or piece.color is not self.side_to_move:
            return []
        return legal_destinations(self.state, (row, col))

    def legal_moves(self) -> List[str]:
        """Return legal moves as coordinate strings."""
        return [square_name(a) + square_name(b) for a, b in iter_legal_moves(self.state)]

    # ── AI and interchange ─────────────────────────────────────────────────

    def best_move(self, difficulty: str = None) -> Optional[Tuple[int, int, int, int]]:
        return best_move(self.state, difficulty or CONFIG.search.difficulty)

    def fen(self) -> str:
        return to_fen(self.state)

    def pgn(self, **headers) -> str:
        return export_pgn(self.state, headers)

    def print_board(self):
        """Print ASCII representation."""
        print(self.state.board)
