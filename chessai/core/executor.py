"""Applying and taking back moves on a GameState.

Every history entry carries the castling rights, en-passant target and
half-move clock from before the move, so ``undo_move`` is the exact inverse
of ``apply_move``. The search relies on that: it plays and takes back
thousands of moves on a single shared state.
"""

from typing import Optional

from chessai.config import CONFIG
from chessai.core.board import (
    PROMOTION_TYPES, Color, GameState, Move, Piece, PieceType, Square,
)
from chessai.core.notation import encode
from chessai.core.rules import en_passant_victim, is_king_in_check, is_legal_move
from chessai.core.status import GameStatus, classify

# corner square -> (owner, king side)
ROOK_ORIGINS = {
    (7, 0): (Color.LIGHT, False),
    (7, 7): (Color.LIGHT, True),
    (0, 0): (Color.DARK, False),
    (0, 7): (Color.DARK, True),
}


def _rook_squares(row: int, king_to_col: int):
    """(rook origin, rook destination) for a castling king landing on ``king_to_col``."""
    if king_to_col > 4:
        return (row, 7), (row, king_to_col - 1)
    return (row, 0), (row, king_to_col + 1)


def _clear_castling_rights(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> None:
    if piece.kind is PieceType.KING:
        state.castling.clear(piece.color)
    # a rook leaving its corner, or being captured on it
    for sq in (from_sq, to_sq):
        if sq in ROOK_ORIGINS:
            state.castling.clear(*ROOK_ORIGINS[sq])


def apply_move(state: GameState, from_sq: Square, to_sq: Square,
               promotion: Optional[PieceType] = PieceType.QUEEN) -> bool:
    """Play a move for the side to move. Returns False, changing nothing, if it is illegal."""
    board = state.board
    piece = board.get(from_sq)
    if piece is None or piece.color is not state.side_to_move:
        return False
    promotion = promotion or PieceType.QUEEN
    if promotion not in PROMOTION_TYPES:
        return False
    if not is_legal_move(state, from_sq, to_sq):
        return False

    color = piece.color
    promoting = piece.kind is PieceType.PAWN and to_sq[0] == color.promotion_rank
    move = Move(
        piece=piece,
        from_square=from_sq,
        to_square=to_sq,
        promotion=promotion if promoting else None,
        notation=encode(state, from_sq, to_sq, promotion),
        prev_castling=state.castling.copy(),
        prev_en_passant=state.en_passant,
        prev_half_move_clock=state.half_move_clock,
    )

    # Captures
    captured = board.get(to_sq)
    victim_sq = en_passant_victim(state, piece, from_sq, to_sq)
    if victim_sq is not None:
        captured = board.get(victim_sq)
        board.set(victim_sq, None)
        move.en_passant = True
    if captured is not None:
        state.captured[color].append(captured)
        move.captured = captured

    # En-passant target lives for one ply only
    state.en_passant = None
    if piece.kind is PieceType.PAWN and abs(to_sq[0] - from_sq[0]) == 2:
        state.en_passant = (from_sq[0] + color.pawn_direction, from_sq[1])

    if piece.kind is PieceType.KING and abs(to_sq[1] - from_sq[1]) == 2:
        rook_from, rook_to = _rook_squares(from_sq[0], to_sq[1])
        board.set(rook_to, board.get(rook_from))
        board.set(rook_from, None)
        move.castling = True

    if piece.kind is PieceType.KING:
        state.king_squares[color] = to_sq

    board.set(to_sq, Piece(color, promotion) if promoting else piece)
    board.set(from_sq, None)

    _clear_castling_rights(state, piece, from_sq, to_sq)

    if piece.kind is PieceType.PAWN or captured is not None:
        state.half_move_clock = 0
    else:
        state.half_move_clock += 1

    state.side_to_move = color.opponent

    move.check = is_king_in_check(state, state.side_to_move)
    move.status = classify(state)
    move.checkmate = move.status is GameStatus.CHECKMATE

    if color is Color.DARK:
        state.full_move_number += 1

    state.history.append(move)
    if CONFIG.check_invariants:
        state.validate()
    return True


def undo_move(state: GameState) -> bool:
    """Take back the last move. Returns False if there is nothing to undo."""
    if not state.history:
        return False

    move = state.history.pop()
    board = state.board
    color = move.piece.color

    # move.piece is the pawn for promotions
    board.set(move.from_square, move.piece)
    if move.en_passant:
        board.set(move.to_square, None)
        board.set((move.to_square[0] - color.pawn_direction, move.to_square[1]), move.captured)
    else:
        board.set(move.to_square, move.captured)

    if move.castling:
        rook_from, rook_to = _rook_squares(move.from_square[0], move.to_square[1])
        board.set(rook_from, board.get(rook_to))
        board.set(rook_to, None)

    if move.piece.kind is PieceType.KING:
        state.king_squares[color] = move.from_square

    if move.captured is not None:
        state.captured[color].pop()

    state.side_to_move = color
    state.castling = move.prev_castling.copy()
    state.en_passant = move.prev_en_passant
    state.half_move_clock = move.prev_half_move_clock
    if color is Color.DARK:
        state.full_move_number -= 1

    if CONFIG.check_invariants:
        state.validate()
    return True
