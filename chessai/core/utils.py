"""Coordinate helpers and search-info formatting."""

from typing import Optional, Tuple

FILES = "abcdefgh"
RANKS = "87654321"  # indexed by row


def square_name(square: Tuple[int, int]) -> str:
    """(6, 4) -> 'e2'."""
    row, col = square
    return FILES[col] + RANKS[row]


def parse_square(name: str) -> Optional[Tuple[int, int]]:
    """'e2' -> (6, 4); None for anything that is not a board square."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        return None
    return RANKS.index(name[1]), FILES.index(name[0])


def parse_uci(text: str) -> Optional[Tuple[Tuple[int, int], Tuple[int, int], Optional[str]]]:
    """Split a coordinate move like 'e7e8q' into (from, to, promotion letter)."""
    text = text.strip().lower()
    if len(text) not in (4, 5):
        return None
    start, end = parse_square(text[:2]), parse_square(text[2:4])
    if start is None or end is None:
        return None
    promotion = text[4].upper() if len(text) == 5 else None
    if promotion is not None and promotion not in "NBRQ":
        return None
    return start, end, promotion


def format_info(depth, score, nodes, elapsed_ms, move) -> str:
    move_str = (square_name(move[0]) + square_name(move[1])) if move else "-"
    nps = int(nodes * 1000 / elapsed_ms) if elapsed_ms > 0 else 0
    return (f"info depth {depth} score {score:.1f} nodes {nodes} nps {nps} "
            f"time {int(elapsed_ms)} move {move_str}")
