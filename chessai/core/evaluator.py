"""Static evaluation: material + piece-square tables + mobility + check penalty.

Scores are from the light side's point of view (positive = light better),
which is what the minimax search maximizes for light and minimizes for dark.
Tables are written for light, row 0 = rank 8; dark reads them mirrored.
"""

from chessai.config import CONFIG
from chessai.core.board import Color, GameState, PieceType
from chessai.core.rules import is_king_in_check, iter_legal_moves
from chessai.core.status import GameStatus, current_status

PAWN_TABLE = (
    (0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0),
    (5.0,  5.0,  5.0,  5.0,  5.0,  5.0,  5.0,  5.0),
    (1.0,  1.0,  2.0,  3.0,  3.0,  2.0,  1.0,  1.0),
    (0.5,  0.5,  1.0,  2.5,  2.5,  1.0,  0.5,  0.5),
    (0.0,  0.0,  0.0,  2.0,  2.0,  0.0,  0.0,  0.0),
    (0.5, -0.5, -1.0,  0.0,  0.0, -1.0, -0.5,  0.5),
    (0.5,  1.0,  1.0, -2.0, -2.0,  1.0,  1.0,  0.5),
    (0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0),
)

KNIGHT_TABLE = (
    (-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0),
    (-4.0, -2.0,  0.0,  0.0,  0.0,  0.0, -2.0, -4.0),
    (-3.0,  0.0,  1.0,  1.5,  1.5,  1.0,  0.0, -3.0),
    (-3.0,  0.5,  1.5,  2.0,  2.0,  1.5,  0.5, -3.0),
    (-3.0,  0.0,  1.5,  2.0,  2.0,  1.5,  0.0, -3.0),
    (-3.0,  0.5,  1.0,  1.5,  1.5,  1.0,  0.5, -3.0),
    (-4.0, -2.0,  0.0,  0.5,  0.5,  0.0, -2.0, -4.0),
    (-5.0, -4.0, -3.0, -3.0, -3.0, -3.0, -4.0, -5.0),
)

BISHOP_TABLE = (
    (-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0),
    (-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0),
    (-1.0,  0.0,  0.5,  1.0,  1.0,  0.5,  0.0, -1.0),
    (-1.0,  0.5,  0.5,  1.0,  1.0,  0.5,  0.5, -1.0),
    (-1.0,  0.0,  1.0,  1.0,  1.0,  1.0,  0.0, -1.0),
    (-1.0,  1.0,  1.0,  1.0,  1.0,  1.0,  1.0, -1.0),
    (-1.0,  0.5,  0.0,  0.0,  0.0,  0.0,  0.5, -1.0),
    (-2.0, -1.0, -1.0, -1.0, -1.0, -1.0, -1.0, -2.0),
)

ROOK_TABLE = (
    (0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0),
    (0.5,  1.0,  1.0,  1.0,  1.0,  1.0,  1.0,  0.5),
    (-0.5, 0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5),
    (-0.5, 0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5),
    (-0.5, 0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5),
    (-0.5, 0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5),
    (-0.5, 0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -0.5),
    (0.0,  0.0,  0.0,  0.5,  0.5,  0.0,  0.0,  0.0),
)

QUEEN_TABLE = (
    (-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0),
    (-1.0,  0.0,  0.0,  0.0,  0.0,  0.0,  0.0, -1.0),
    (-1.0,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0),
    (-0.5,  0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5),
    (0.0,   0.0,  0.5,  0.5,  0.5,  0.5,  0.0, -0.5),
    (-1.0,  0.5,  0.5,  0.5,  0.5,  0.5,  0.0, -1.0),
    (-1.0,  0.0,  0.5,  0.0,  0.0,  0.0,  0.0, -1.0),
    (-2.0, -1.0, -1.0, -0.5, -0.5, -1.0, -1.0, -2.0),
)

KING_TABLE = (
    (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
    (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
    (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
    (-3.0, -4.0, -4.0, -5.0, -5.0, -4.0, -4.0, -3.0),
    (-2.0, -3.0, -3.0, -4.0, -4.0, -3.0, -3.0, -2.0),
    (-1.0, -2.0, -2.0, -2.0, -2.0, -2.0, -2.0, -1.0),
    (2.0,   2.0,  0.0,  0.0,  0.0,  0.0,  2.0,  2.0),
    (2.0,   3.0,  1.0,  0.0,  0.0,  1.0,  3.0,  2.0),
)

# Endgame: the king belongs in the center.
KING_ENDGAME_TABLE = (
    (-5.0, -4.0, -3.0, -2.0, -2.0, -3.0, -4.0, -5.0),
    (-3.0, -2.0, -1.0,  0.0,  0.0, -1.0, -2.0, -3.0),
    (-3.0, -1.0,  2.0,  3.0,  3.0,  2.0, -1.0, -3.0),
    (-3.0, -1.0,  3.0,  4.0,  4.0,  3.0, -1.0, -3.0),
    (-3.0, -1.0,  3.0,  4.0,  4.0,  3.0, -1.0, -3.0),
    (-3.0, -1.0,  2.0,  3.0,  3.0,  2.0, -1.0, -3.0),
    (-3.0, -3.0,  0.0,  0.0,  0.0,  0.0, -3.0, -3.0),
    (-5.0, -3.0, -3.0, -3.0, -3.0, -3.0, -3.0, -5.0),
)

PIECE_TABLES = {
    PieceType.PAWN: PAWN_TABLE,
    PieceType.KNIGHT: KNIGHT_TABLE,
    PieceType.BISHOP: BISHOP_TABLE,
    PieceType.ROOK: ROOK_TABLE,
    PieceType.QUEEN: QUEEN_TABLE,
    PieceType.KING: KING_TABLE,
}


class Evaluator:
    def __init__(self):
        self.cfg = CONFIG.eval

    def terminal_score(self, state: GameState, status: GameStatus) -> float:
        """Score of a finished game: mate favors the side that delivered it, draws are 0."""
        if status is GameStatus.CHECKMATE:
            mated = state.side_to_move
            return -self.cfg.mate_score if mated is Color.LIGHT else self.cfg.mate_score
        return 0.0

    def is_endgame(self, state: GameState) -> bool:
        heavy = sum(1 for _, p in state.board.squares()
                    if p.kind in (PieceType.QUEEN, PieceType.ROOK))
        return heavy <= self.cfg.endgame_heavy_pieces

    def material_and_position(self, state: GameState) -> float:
        endgame = self.is_endgame(state)
        value = 0.0
        for (row, col), piece in state.board.squares():
            table = PIECE_TABLES[piece.kind]
            if piece.kind is PieceType.KING and endgame:
                table = KING_ENDGAME_TABLE
            material = self.cfg.piece_values[piece.kind.name]
            if piece.color is Color.LIGHT:
                value += material + table[row][col]
            else:
                value -= material + table[7 - row][col]
        return value

    def evaluate(self, state: GameState) -> float:
        status = current_status(state)
        if status.is_terminal:
            return self.terminal_score(state, status)

        value = self.material_and_position(state)

        side = state.side_to_move
        sign = 1 if side is Color.LIGHT else -1
        mobility = sum(1 for _ in iter_legal_moves(state))
        value += sign * mobility * self.cfg.mobility_weight

        if is_king_in_check(state, side):
            value -= sign * self.cfg.check_penalty

        return value
