"""FEN import/export for GameState."""

from chessai.core.board import (
    Board, CastlingRights, Color, GameState, Piece, PieceType,
)
from chessai.core.errors import FenError
from chessai.core.utils import parse_square, square_name

CASTLING_LETTERS = (
    ("K", Color.LIGHT, True),
    ("Q", Color.LIGHT, False),
    ("k", Color.DARK, True),
    ("q", Color.DARK, False),
)


def board_fen(board: Board) -> str:
    rows = []
    for row in range(8):
        text, empty = "", 0
        for col in range(8):
            piece = board.get((row, col))
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += piece.symbol()
        if empty:
            text += str(empty)
        rows.append(text)
    return "/".join(rows)


def to_fen(state: GameState) -> str:
    castling = "".join(letter for letter, color, king_side in CASTLING_LETTERS
                       if state.castling.has(color, king_side)) or "-"
    ep = square_name(state.en_passant) if state.en_passant else "-"
    return " ".join([
        board_fen(state.board),
        state.side_to_move.value,
        castling,
        ep,
        str(state.half_move_clock),
        str(state.full_move_number),
    ])


def _parse_board(text: str) -> Board:
    rows = text.split("/")
    if len(rows) != 8:
        raise FenError(f"expected 8 ranks, got {len(rows)}")
    board = Board()
    for row, row_text in enumerate(rows):
        col = 0
        for ch in row_text:
            if ch.isdigit():
                col += int(ch)
                continue
            piece = Piece.from_symbol(ch)
            if piece is None:
                raise FenError(f"invalid piece {ch!r}")
            if col > 7:
                raise FenError(f"rank {8 - row} is too long")
            board.set((row, col), piece)
            col += 1
        if col != 8:
            raise FenError(f"rank {8 - row} has {col} files")
    return board


def from_fen(fen: str) -> GameState:
    """Build a GameState from a six-field FEN (the clock fields may be omitted)."""
    parts = fen.split()
    if len(parts) == 4:
        parts += ["0", "1"]
    if len(parts) != 6:
        raise FenError(f"expected 6 fields, got {len(parts)}")
    placement, side, castling_text, ep_text, half_text, full_text = parts

    board = _parse_board(placement)

    if side not in ("w", "b"):
        raise FenError(f"invalid side to move {side!r}")

    if castling_text != "-" and (not set(castling_text) <= set("KQkq")
                                 or len(set(castling_text)) != len(castling_text)):
        raise FenError(f"invalid castling field {castling_text!r}")
    castling = CastlingRights(
        light_king_side="K" in castling_text,
        light_queen_side="Q" in castling_text,
        dark_king_side="k" in castling_text,
        dark_queen_side="q" in castling_text,
    )

    en_passant = None
    if ep_text != "-":
        en_passant = parse_square(ep_text)
        if en_passant is None or en_passant[0] not in (2, 5):
            raise FenError(f"invalid en-passant square {ep_text!r}")

    try:
        half_move_clock = int(half_text)
        full_move_number = int(full_text)
    except ValueError:
        raise FenError("move counters must be integers")
    if half_move_clock < 0 or full_move_number < 1:
        raise FenError("move counters out of range")

    kings = {}
    for color in Color:
        found = board.find(Piece(color, PieceType.KING))
        if len(found) != 1:
            raise FenError(f"{color.label} must have exactly one king")
        kings[color] = found[0]

    return GameState(
        board=board,
        side_to_move=Color(side),
        castling=castling,
        en_passant=en_passant,
        half_move_clock=half_move_clock,
        full_move_number=full_move_number,
        king_squares=kings,
        initial_fen=" ".join(parts),
    )
