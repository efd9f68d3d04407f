"""Standard algebraic notation for a move about to be played.

Must be called on the position *before* the move: disambiguation asks
whether another piece of the same kind could legally reach the same square.
The check suffix is not part of the result; ``Move.san`` adds it once the
executor knows whether the move gives check.
"""

from typing import Optional

from chessai.core.board import GameState, PieceType, Square
from chessai.core.rules import en_passant_victim, is_legal_move
from chessai.core.utils import FILES, RANKS, square_name


def _disambiguation(state: GameState, from_sq: Square, to_sq: Square) -> str:
    piece = state.board.get(from_sq)
    rivals = [
        sq for sq, p in state.board.squares()
        if p == piece and sq != from_sq and is_legal_move(state, sq, to_sq)
    ]
    if not rivals:
        return ""
    row, col = from_sq
    if all(sq[1] != col for sq in rivals):
        return FILES[col]
    if all(sq[0] != row for sq in rivals):
        return RANKS[row]
    return FILES[col] + RANKS[row]


def encode(state: GameState, from_sq: Square, to_sq: Square,
           promotion: Optional[PieceType] = PieceType.QUEEN) -> str:
    piece = state.board.get(from_sq)
    if piece is None:
        return ""

    if piece.kind is PieceType.KING and abs(to_sq[1] - from_sq[1]) == 2:
        return "O-O" if to_sq[1] > from_sq[1] else "O-O-O"

    is_capture = (state.board.get(to_sq) is not None
                  or en_passant_victim(state, piece, from_sq, to_sq) is not None)

    if piece.kind is PieceType.PAWN:
        text = FILES[from_sq[1]] + "x" if is_capture else ""
        text += square_name(to_sq)
        if to_sq[0] == piece.color.promotion_rank:
            text += "=" + (promotion or PieceType.QUEEN).value
        return text

    text = piece.kind.value + _disambiguation(state, from_sq, to_sq)
    if is_capture:
        text += "x"
    return text + square_name(to_sq)
