"""Board and game state: the data the rules, executor and search operate on.

Squares are ``(row, col)`` tuples. Row 0 is the dark back rank (rank 8) and
row 7 the light back rank (rank 1); column 0 is the a-file.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from chessai.core.errors import StateCorruptionError
from chessai.core.utils import square_name

if TYPE_CHECKING:
    from chessai.core.status import GameStatus

Square = Tuple[int, int]

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


class Color(Enum):
    LIGHT = "w"
    DARK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.DARK if self is Color.LIGHT else Color.LIGHT

    @property
    def pawn_direction(self) -> int:
        """Row delta of a forward pawn step."""
        return -1 if self is Color.LIGHT else 1

    @property
    def back_rank(self) -> int:
        return 7 if self is Color.LIGHT else 0

    @property
    def pawn_rank(self) -> int:
        return 6 if self is Color.LIGHT else 1

    @property
    def promotion_rank(self) -> int:
        return 0 if self is Color.LIGHT else 7

    @property
    def label(self) -> str:
        return "Light" if self is Color.LIGHT else "Dark"


class PieceType(Enum):
    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"

    @classmethod
    def from_letter(cls, letter: str) -> Optional["PieceType"]:
        try:
            return cls(letter.upper())
        except ValueError:
            return None


PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@dataclass(frozen=True)
class Piece:
    color: Color
    kind: PieceType

    def symbol(self) -> str:
        """FEN letter: upper case for light, lower case for dark."""
        letter = self.kind.value
        return letter if self.color is Color.LIGHT else letter.lower()

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Piece"]:
        kind = PieceType.from_letter(symbol)
        if kind is None:
            return None
        return cls(Color.LIGHT if symbol.isupper() else Color.DARK, kind)

    def __str__(self) -> str:
        return self.symbol()


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


class Board:
    """8x8 grid of optional pieces. Pure data holder, no legality logic."""

    def __init__(self):
        self._cells: List[List[Optional[Piece]]] = [[None] * 8 for _ in range(8)]

    @classmethod
    def initial(cls) -> "Board":
        board = cls()
        back = [PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
                PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK]
        for col, kind in enumerate(back):
            board.set((0, col), Piece(Color.DARK, kind))
            board.set((1, col), Piece(Color.DARK, PieceType.PAWN))
            board.set((6, col), Piece(Color.LIGHT, PieceType.PAWN))
            board.set((7, col), Piece(Color.LIGHT, kind))
        return board

    def get(self, square: Square) -> Optional[Piece]:
        row, col = square
        if not in_bounds(row, col):
            return None
        return self._cells[row][col]

    def set(self, square: Square, piece: Optional[Piece]) -> None:
        row, col = square
        if not in_bounds(row, col):
            return
        self._cells[row][col] = piece

    def squares(self) -> Iterator[Tuple[Square, Piece]]:
        """Occupied cells in row-major order."""
        for row in range(8):
            for col in range(8):
                piece = self._cells[row][col]
                if piece is not None:
                    yield (row, col), piece

    def find(self, piece: Piece) -> List[Square]:
        return [sq for sq, p in self.squares() if p == piece]

    def copy(self) -> "Board":
        other = Board()
        other._cells = [list(row) for row in self._cells]
        return other

    def __eq__(self, other) -> bool:
        return isinstance(other, Board) and self._cells == other._cells

    def __str__(self) -> str:
        lines = []
        for row in range(8):
            cells = [p.symbol() if p else "." for p in self._cells[row]]
            lines.append(" ".join(cells))
        return "\n".join(lines)


@dataclass
class CastlingRights:
    light_king_side: bool = True
    light_queen_side: bool = True
    dark_king_side: bool = True
    dark_queen_side: bool = True

    def has(self, color: Color, king_side: bool) -> bool:
        return getattr(self, self._attr(color, king_side))

    def clear(self, color: Color, king_side: Optional[bool] = None) -> None:
        """Clear one wing, or both when ``king_side`` is None."""
        wings = (True, False) if king_side is None else (king_side,)
        for wing in wings:
            setattr(self, self._attr(color, wing), False)

    def copy(self) -> "CastlingRights":
        return replace(self)

    @staticmethod
    def _attr(color: Color, king_side: bool) -> str:
        side = "light" if color is Color.LIGHT else "dark"
        wing = "king" if king_side else "queen"
        return f"{side}_{wing}_side"


@dataclass
class Move:
    """A move as recorded in the game history."""
    piece: Piece
    from_square: Square
    to_square: Square
    captured: Optional[Piece] = None
    promotion: Optional[PieceType] = None
    castling: bool = False
    en_passant: bool = False
    check: bool = False
    checkmate: bool = False
    notation: str = ""
    # state before the move, restored verbatim by undo
    prev_castling: CastlingRights = field(default_factory=CastlingRights)
    prev_en_passant: Optional[Square] = None
    prev_half_move_clock: int = 0
    # classification of the position after the move
    status: Optional["GameStatus"] = None

    @property
    def san(self) -> str:
        if self.checkmate:
            return self.notation + "#"
        if self.check:
            return self.notation + "+"
        return self.notation

    def uci(self) -> str:
        text = square_name(self.from_square) + square_name(self.to_square)
        if self.promotion:
            text += self.promotion.value.lower()
        return text


@dataclass
class GameState:
    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.LIGHT
    castling: CastlingRights = field(default_factory=CastlingRights)
    en_passant: Optional[Square] = None
    half_move_clock: int = 0
    full_move_number: int = 1
    king_squares: Dict[Color, Square] = field(
        default_factory=lambda: {Color.LIGHT: (7, 4), Color.DARK: (0, 4)})
    history: List[Move] = field(default_factory=list)
    captured: Dict[Color, List[Piece]] = field(
        default_factory=lambda: {Color.LIGHT: [], Color.DARK: []})
    initial_fen: str = STARTING_FEN

    def reset(self) -> None:
        """Reinitialize to the standard starting position."""
        fresh = GameState()
        self.__dict__.update(fresh.__dict__)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.board.get(square)

    def last_move(self) -> Optional[Move]:
        return self.history[-1] if self.history else None

    def locate_kings(self) -> Dict[Color, List[Square]]:
        found: Dict[Color, List[Square]] = {Color.LIGHT: [], Color.DARK: []}
        for sq, piece in self.board.squares():
            if piece.kind is PieceType.KING:
                found[piece.color].append(sq)
        return found

    def validate(self) -> None:
        """Raise StateCorruptionError if the king cache disagrees with the board."""
        found = self.locate_kings()
        for color in Color:
            if found[color] != [self.king_squares[color]]:
                raise StateCorruptionError(
                    f"{color.label} king cache {self.king_squares[color]} "
                    f"but board has {found[color]}")

    def snapshot(self) -> tuple:
        """Hashable view of everything apply/undo must keep symmetric."""
        return (
            str(self.board),
            self.side_to_move,
            astuple(self.castling),
            self.en_passant,
            self.half_move_clock,
            self.full_move_number,
            tuple(sorted((c.value, sq) for c, sq in self.king_squares.items())),
            len(self.history),
            tuple(len(v) for v in self.captured.values()),
        )
