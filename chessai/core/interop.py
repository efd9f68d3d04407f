"""Bridges to python-chess: Board conversion and PGN export of the move history."""

from typing import Dict, Optional

import chess
import chess.pgn

from chessai.core.board import Color, GameState
from chessai.core.fen import to_fen
from chessai.core.status import GameStatus, current_status


def to_chess_board(state: GameState) -> chess.Board:
    """Current position as a python-chess Board (no move stack)."""
    return chess.Board(to_fen(state))


def _result(state: GameState) -> str:
    status = current_status(state)
    if status is GameStatus.CHECKMATE:
        return "0-1" if state.side_to_move is Color.LIGHT else "1-0"
    if status.is_draw:
        return "1/2-1/2"
    return "*"


def export_pgn(state: GameState, headers: Optional[Dict[str, str]] = None) -> str:
    """Replay the history with python-chess and render it as PGN text."""
    board = chess.Board(state.initial_fen)
    game = chess.pgn.Game()
    if state.initial_fen != chess.STARTING_FEN:
        game.setup(board)
    for key, value in (headers or {}).items():
        game.headers[key] = value
    game.headers["Result"] = _result(state)

    node = game
    for move in state.history:
        node = node.add_variation(chess.Move.from_uci(move.uci()))

    exporter = chess.pgn.StringExporter(headers=True, variations=False, comments=False)
    return game.accept(exporter)
