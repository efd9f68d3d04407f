"""Move legality and attack detection.

Two layers: per-piece movement geometry (``_obeys_movement``), then the
self-check filter that plays the move on the live state, looks at the
mover's king and puts everything back. Attack detection is a plain board
scan and never goes through ``is_legal_move``.
"""

from typing import Iterator, List, Optional, Tuple

from chessai.core.board import Color, GameState, Piece, PieceType, Square, in_bounds

KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

KING_START_COL = 4


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


# ── Attack detection ───────────────────────────────────────────────────────

def is_square_attacked(state: GameState, square: Square, defending_color: Color) -> bool:
    """True if any piece of the opponent of ``defending_color`` attacks ``square``."""
    board = state.board
    attacker = defending_color.opponent
    row, col = square

    # An attacking pawn stands one step "behind" the square from its own side.
    pawn_row = row - attacker.pawn_direction
    for dc in (-1, 1):
        p = board.get((pawn_row, col + dc))
        if p is not None and p.color is attacker and p.kind is PieceType.PAWN:
            return True

    for dr, dc in KNIGHT_OFFSETS:
        p = board.get((row + dr, col + dc))
        if p is not None and p.color is attacker and p.kind is PieceType.KNIGHT:
            return True

    for dr, dc in KING_OFFSETS:
        p = board.get((row + dr, col + dc))
        if p is not None and p.color is attacker and p.kind is PieceType.KING:
            return True

    for directions, kinds in ((ORTHOGONAL, (PieceType.ROOK, PieceType.QUEEN)),
                              (DIAGONAL, (PieceType.BISHOP, PieceType.QUEEN))):
        for dr, dc in directions:
            r, c = row + dr, col + dc
            while in_bounds(r, c):
                p = board.get((r, c))
                if p is not None:
                    if p.color is attacker and p.kind in kinds:
                        return True
                    break
                r += dr
                c += dc

    return False


def is_king_in_check(state: GameState, color: Color) -> bool:
    return is_square_attacked(state, state.king_squares[color], color)


# ── Movement geometry ──────────────────────────────────────────────────────

def en_passant_victim(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> Optional[Square]:
    """Square of the pawn an en-passant capture would remove, or None."""
    if piece.kind is not PieceType.PAWN or state.en_passant != to_sq:
        return None
    direction = piece.color.pawn_direction
    if to_sq[0] != from_sq[0] + direction or abs(to_sq[1] - from_sq[1]) != 1:
        return None
    victim_sq = (to_sq[0] - direction, to_sq[1])
    victim = state.board.get(victim_sq)
    if victim is None or victim.color is piece.color or victim.kind is not PieceType.PAWN:
        return None
    return victim_sq


def _ray_clear(state: GameState, from_sq: Square, to_sq: Square) -> bool:
    """Every square strictly between two aligned squares is empty."""
    dr = _sign(to_sq[0] - from_sq[0])
    dc = _sign(to_sq[1] - from_sq[1])
    r, c = from_sq[0] + dr, from_sq[1] + dc
    while (r, c) != to_sq:
        if state.board.get((r, c)) is not None:
            return False
        r += dr
        c += dc
    return True


def _pawn_ok(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    board = state.board
    direction = piece.color.pawn_direction
    (r0, c0), (r1, c1) = from_sq, to_sq

    if c0 == c1:
        if r1 == r0 + direction:
            return board.get(to_sq) is None
        if r0 == piece.color.pawn_rank and r1 == r0 + 2 * direction:
            return board.get((r0 + direction, c0)) is None and board.get(to_sq) is None
        return False

    if abs(c1 - c0) == 1 and r1 == r0 + direction:
        target = board.get(to_sq)
        if target is not None:
            return target.color is not piece.color
        return en_passant_victim(state, piece, from_sq, to_sq) is not None
    return False


def _castling_ok(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    color = piece.color
    row = color.back_rank
    if from_sq != (row, KING_START_COL) or to_sq[0] != row:
        return False
    king_side = to_sq[1] > from_sq[1]
    if not state.castling.has(color, king_side):
        return False

    rook_col = 7 if king_side else 0
    if state.board.get((row, rook_col)) != Piece(color, PieceType.ROOK):
        return False

    step = 1 if king_side else -1
    for col in range(KING_START_COL + step, rook_col, step):
        if state.board.get((row, col)) is not None:
            return False

    # origin (not in check), the crossed square and the destination
    for col in (KING_START_COL, KING_START_COL + step, KING_START_COL + 2 * step):
        if is_square_attacked(state, (row, col), color):
            return False
    return True


def _obeys_movement(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    dr = to_sq[0] - from_sq[0]
    dc = to_sq[1] - from_sq[1]
    kind = piece.kind

    if kind is PieceType.PAWN:
        return _pawn_ok(state, piece, from_sq, to_sq)
    if kind is PieceType.KNIGHT:
        return (abs(dr), abs(dc)) in ((1, 2), (2, 1))
    if kind is PieceType.KING:
        if abs(dr) <= 1 and abs(dc) <= 1:
            return True
        if dr == 0 and abs(dc) == 2:
            return _castling_ok(state, piece, from_sq, to_sq)
        return False

    straight = dr == 0 or dc == 0
    diagonal = abs(dr) == abs(dc)
    if kind is PieceType.ROOK and not straight:
        return False
    if kind is PieceType.BISHOP and not diagonal:
        return False
    if kind is PieceType.QUEEN and not (straight or diagonal):
        return False
    return _ray_clear(state, from_sq, to_sq)


# ── Legality ───────────────────────────────────────────────────────────────

def _leaves_king_attacked(state: GameState, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
    board = state.board
    color = piece.color
    captured = board.get(to_sq)
    victim_sq = en_passant_victim(state, piece, from_sq, to_sq)
    victim = board.get(victim_sq) if victim_sq else None
    saved_king = state.king_squares[color]
    saved_ep = state.en_passant

    try:
        if victim_sq:
            board.set(victim_sq, None)
        board.set(to_sq, piece)
        board.set(from_sq, None)
        if piece.kind is PieceType.KING:
            state.king_squares[color] = to_sq
        return is_king_in_check(state, color)
    finally:
        board.set(from_sq, piece)
        board.set(to_sq, captured)
        if victim_sq:
            board.set(victim_sq, victim)
        state.king_squares[color] = saved_king
        state.en_passant = saved_ep


def is_legal_move(state: GameState, from_sq: Square, to_sq: Square) -> bool:
    """Movement rule for the piece on ``from_sq`` plus the self-check filter.

    Does not look at whose turn it is; the executor checks that.
    """
    if not in_bounds(*from_sq) or not in_bounds(*to_sq) or from_sq == to_sq:
        return False
    piece = state.board.get(from_sq)
    if piece is None:
        return False
    target = state.board.get(to_sq)
    if target is not None and target.color is piece.color:
        return False
    if not _obeys_movement(state, piece, from_sq, to_sq):
        return False
    return not _leaves_king_attacked(state, piece, from_sq, to_sq)


# ── Move enumeration ───────────────────────────────────────────────────────

def candidate_destinations(state: GameState, from_sq: Square) -> List[Square]:
    """Squares the piece on ``from_sq`` could geometrically reach, row-major.

    A superset of its legal destinations; filtering it with ``is_legal_move``
    gives the same list as probing all 64 squares.
    """
    piece = state.board.get(from_sq)
    if piece is None:
        return []
    row, col = from_sq
    targets = set()

    if piece.kind is PieceType.PAWN:
        d = piece.color.pawn_direction
        targets.update({(row + d, col), (row + 2 * d, col), (row + d, col - 1), (row + d, col + 1)})
    elif piece.kind is PieceType.KNIGHT:
        targets.update((row + dr, col + dc) for dr, dc in KNIGHT_OFFSETS)
    elif piece.kind is PieceType.KING:
        targets.update((row + dr, col + dc) for dr, dc in KING_OFFSETS)
        targets.update({(row, col - 2), (row, col + 2)})
    else:
        directions = {
            PieceType.ROOK: ORTHOGONAL,
            PieceType.BISHOP: DIAGONAL,
            PieceType.QUEEN: ORTHOGONAL + DIAGONAL,
        }[piece.kind]
        for dr, dc in directions:
            r, c = row + dr, col + dc
            while in_bounds(r, c):
                targets.add((r, c))
                if state.board.get((r, c)) is not None:
                    break
                r += dr
                c += dc

    return sorted(sq for sq in targets if in_bounds(*sq))


def legal_destinations(state: GameState, from_sq: Square) -> List[Square]:
    return [to for to in candidate_destinations(state, from_sq) if is_legal_move(state, from_sq, to)]


def iter_legal_moves(state: GameState, color: Optional[Color] = None) -> Iterator[Tuple[Square, Square]]:
    """Legal (from, to) pairs for ``color`` (default: side to move) in board order."""
    color = color or state.side_to_move
    own = [sq for sq, p in state.board.squares() if p.color is color]
    for from_sq in own:
        for to_sq in legal_destinations(state, from_sq):
            yield from_sq, to_sq
