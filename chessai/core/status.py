"""Game-state classification: check, mate, stalemate and the draw rules."""

from enum import Enum
from typing import Optional

from chessai.core.board import Color, GameState, PieceType
from chessai.core.rules import is_king_in_check, iter_legal_moves

FIFTY_MOVE_PLIES = 100


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_MATERIAL = "draw_material"
    DRAW_FIFTY_MOVE = "draw_fifty_move"

    @property
    def is_terminal(self) -> bool:
        return self not in (GameStatus.IN_PROGRESS, GameStatus.CHECK)

    @property
    def is_draw(self) -> bool:
        return self in (GameStatus.STALEMATE, GameStatus.DRAW_MATERIAL, GameStatus.DRAW_FIFTY_MOVE)


def has_no_legal_moves(state: GameState) -> bool:
    return next(iter_legal_moves(state), None) is None


def is_checkmate(state: GameState) -> bool:
    return is_king_in_check(state, state.side_to_move) and has_no_legal_moves(state)


def is_stalemate(state: GameState) -> bool:
    return not is_king_in_check(state, state.side_to_move) and has_no_legal_moves(state)


def is_draw_by_fifty_moves(state: GameState) -> bool:
    return state.half_move_clock >= FIFTY_MOVE_PLIES


def is_draw_by_material(state: GameState) -> bool:
    """K v K, K+N v K, K+B v K, and K+B v K+B with same-colored bishops."""
    others = [(sq, p) for sq, p in state.board.squares() if p.kind is not PieceType.KING]
    if not others:
        return True
    if len(others) == 1:
        return others[0][1].kind in (PieceType.KNIGHT, PieceType.BISHOP)
    if len(others) == 2:
        (sq_a, a), (sq_b, b) = others
        if a.kind is PieceType.BISHOP and b.kind is PieceType.BISHOP and a.color is not b.color:
            return sum(sq_a) % 2 == sum(sq_b) % 2
    return False


def classify(state: GameState) -> GameStatus:
    in_check = is_king_in_check(state, state.side_to_move)
    if has_no_legal_moves(state):
        return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE
    if is_draw_by_material(state):
        return GameStatus.DRAW_MATERIAL
    if is_draw_by_fifty_moves(state):
        return GameStatus.DRAW_FIFTY_MOVE
    return GameStatus.CHECK if in_check else GameStatus.IN_PROGRESS


def current_status(state: GameState) -> GameStatus:
    """Status of the current position; recorded on the last move by the executor."""
    last = state.last_move()
    if last is not None and last.status is not None:
        return last.status
    return classify(state)


def is_game_over(state: GameState) -> bool:
    return current_status(state).is_terminal


def status_description(state: GameState) -> str:
    status = current_status(state)
    side = state.side_to_move
    if status is GameStatus.CHECKMATE:
        return f"{side.opponent.label} wins by checkmate"
    if status is GameStatus.STALEMATE:
        return "Draw by stalemate"
    if status is GameStatus.DRAW_MATERIAL:
        return "Draw by insufficient material"
    if status is GameStatus.DRAW_FIFTY_MOVE:
        return "Draw by fifty-move rule"
    if status is GameStatus.CHECK:
        return f"{side.label} is in check"
    return f"{side.label} to move"


def winner(state: GameState) -> Optional[Color]:
    """Color that delivered mate, or None."""
    if current_status(state) is GameStatus.CHECKMATE:
        return state.side_to_move.opponent
    return None

