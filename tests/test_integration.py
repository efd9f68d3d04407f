"""
Integration test suite for chessai.

Tests components working together end-to-end:
- Full games through the Game facade (scripted and engine vs engine)
- Move generation, notation and FEN cross-checked against python-chess
- PGN export
- Terminal front end
"""

import builtins
import io
import random

import chess
import chess.pgn
import pytest

from chessai.core.board import Color, GameState, Piece, PieceType
from chessai.core.executor import apply_move
from chessai.core.fen import to_fen
from chessai.core.interop import export_pgn, to_chess_board
from chessai.core.rules import is_king_in_check, iter_legal_moves
from chessai.core.search import SearchEngine
from chessai.core.status import GameStatus, current_status
from chessai.core.utils import square_name
from chessai.main import Game
from interface.cli import build_parser, main, render

SCHOLARS_MATE = ["e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7"]


def from_chess_square(square):
    return 7 - chess.square_rank(square), chess.square_file(square)


# ════════════════════════════════════════════════════════════════════════════
#  GAME FACADE: FULL GAMES
# ════════════════════════════════════════════════════════════════════════════


class TestGameFacade:
    """Scripted games played through the public Game surface."""

    def setup_method(self):
        self.game = Game()

    def test_initial_queries(self):
        assert self.game.side_to_move is Color.LIGHT
        assert self.game.winner is None
        assert self.game.status is GameStatus.IN_PROGRESS
        assert not self.game.is_game_over
        assert self.game.status_description() == "Light to move"
        assert self.game.last_move() is None
        assert len(self.game.legal_moves()) == 20
        assert "g1f3" in self.game.legal_moves()

    def test_legal_destinations_respect_turn(self):
        assert self.game.legal_destinations(6, 4) == [(4, 4), (5, 4)]
        assert self.game.legal_destinations(1, 4) == []
        assert self.game.legal_destinations(4, 4) == []

    @pytest.mark.parametrize("text", ["", "zzzz", "e2e5", "e2e4x", "e7e5", "e9e4"])
    def test_bad_input_rejected(self, text):
        before = self.game.fen()
        assert not self.game.make_move(text)
        assert self.game.fen() == before

    def test_scholars_mate(self):
        """Light mates on move four."""
        for text in SCHOLARS_MATE:
            assert self.game.make_move(text), text
        assert self.game.move_history == ["e4", "e5", "Bc4", "Nc6", "Qh5", "Nf6", "Qxf7#"]
        assert self.game.is_game_over
        assert self.game.status is GameStatus.CHECKMATE
        assert self.game.status_description() == "Light wins by checkmate"
        assert self.game.is_in_check(Color.DARK)
        assert self.game.winner is Color.LIGHT
        assert self.game.captured_pieces[Color.LIGHT] == [Piece(Color.DARK, PieceType.PAWN)]
        assert self.game.best_move("easy") is None

    def test_undo_after_mate(self):
        for text in SCHOLARS_MATE:
            self.game.make_move(text)
        assert self.game.undo()
        assert not self.game.is_game_over
        assert self.game.side_to_move is Color.LIGHT
        assert self.game.piece_at(1, 5) == Piece(Color.DARK, PieceType.PAWN)

    def test_fifty_move_draw(self):
        """Knights shuffling back and forth for fifty full moves."""
        shuffle = ["g1f3", "g8f6", "f3g1", "f6g8"] * 25
        for text in shuffle[:-1]:
            assert self.game.make_move(text)
        assert not self.game.is_game_over
        assert self.game.make_move(shuffle[-1])
        assert self.game.state.half_move_clock == 100
        assert self.game.status is GameStatus.DRAW_FIFTY_MOVE
        assert self.game.status_description() == "Draw by fifty-move rule"

    def test_promotion_choice(self):
        game = Game.from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        assert game.apply_move(1, 0, 0, 0, PieceType.ROOK)
        assert game.piece_at(0, 0) == Piece(Color.LIGHT, PieceType.ROOK)
        assert game.undo()
        assert game.apply_move(1, 0, 0, 0)
        assert game.piece_at(0, 0) == Piece(Color.LIGHT, PieceType.QUEEN)

    def test_reset(self):
        self.game.make_move("e2e4")
        self.game.reset()
        assert self.game.fen() == chess.STARTING_FEN
        assert self.game.move_history == []

    def test_print_board(self, capsys):
        self.game.print_board()
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "r n b q k b n r"

    def test_ai_reply_is_legal(self):
        self.game.make_move("e2e4")
        move = self.game.best_move("easy")
        assert move is not None
        fr, fc, tr, tc = move
        assert square_name((fr, fc)) + square_name((tr, tc)) in self.game.legal_moves()
        assert self.game.apply_move(fr, fc, tr, tc)


class TestEngineVsEngine:
    """Short self-play games with a shallow engine."""

    def test_self_play(self):
        state = GameState()
        engine = SearchEngine(depth=1)
        for _ in range(16):
            move = engine.get_best_move(state)
            if move is None:
                break
            assert move in engine.generate_all_legal_moves(state)
            assert apply_move(state, *move)
            state.validate()
        assert len(state.history) > 0

    def test_mate_in_one_is_taken(self):
        game = Game.from_fen("6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1")
        fr, fc, tr, tc = game.best_move("easy")
        assert game.apply_move(fr, fc, tr, tc)
        assert game.status is GameStatus.CHECKMATE
        assert game.last_move().san == "Ra8#"


# ════════════════════════════════════════════════════════════════════════════
#  CROSS-CHECK AGAINST PYTHON-CHESS
# ════════════════════════════════════════════════════════════════════════════


class TestPythonChessCrossCheck:
    """Random playouts compared move by move with python-chess."""

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_random_playout(self, seed):
        rng = random.Random(seed)
        state = GameState()
        board = chess.Board()

        for _ in range(120):
            ours = sorted(iter_legal_moves(state))
            theirs = sorted({
                (from_chess_square(m.from_square), from_chess_square(m.to_square))
                for m in board.legal_moves if m.promotion in (None, chess.QUEEN)
            })
            assert ours == theirs, board.fen()
            assert is_king_in_check(state, state.side_to_move) == board.is_check()
            if not ours:
                break

            from_sq, to_sq = rng.choice(ours)
            uci = square_name(from_sq) + square_name(to_sq)
            piece = state.piece_at(from_sq)
            if piece.kind is PieceType.PAWN and to_sq[0] == piece.color.promotion_rank:
                uci += "q"
            move = chess.Move.from_uci(uci)
            expected_san = board.san(move)
            board.push(move)

            assert apply_move(state, from_sq, to_sq)
            assert state.last_move().san == expected_san
            assert to_fen(state) == board.fen(en_passant="fen")
            assert (current_status(state) is GameStatus.CHECKMATE) == board.is_checkmate()
            assert (current_status(state) is GameStatus.STALEMATE) == board.is_stalemate()

    @pytest.mark.parametrize("fen", [
        "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
        "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
        "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1",
        "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8",
    ])
    def test_move_sets_match(self, fen):
        game = Game.from_fen(fen)
        board = to_chess_board(game.state)
        theirs = sorted({m.uci()[:4] for m in board.legal_moves})
        assert sorted(game.legal_moves()) == theirs

    def test_board_conversion(self):
        game = Game()
        game.make_move("e2e4")
        board = to_chess_board(game.state)
        assert board.fen(en_passant="fen") == game.fen()
        assert board.turn == chess.BLACK


# ════════════════════════════════════════════════════════════════════════════
#  PGN EXPORT
# ════════════════════════════════════════════════════════════════════════════


class TestPgn:
    def test_finished_game(self):
        game = Game()
        for text in SCHOLARS_MATE:
            game.make_move(text)
        text = game.pgn(Event="Test", White="Alice", Black="Bob")
        parsed = chess.pgn.read_game(io.StringIO(text))
        assert parsed.headers["Result"] == "1-0"
        assert parsed.headers["Event"] == "Test"
        moves = list(parsed.mainline_moves())
        assert [m.uci() for m in moves] == SCHOLARS_MATE
        assert parsed.end().board().is_checkmate()
        assert "Qxf7#" in text

    def test_unfinished_game(self):
        game = Game()
        game.make_move("d2d4")
        assert '[Result "*"]' in game.pgn()

    def test_custom_start_position(self):
        fen = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"
        game = Game.from_fen(fen)
        game.make_move("a7a8n")
        text = export_pgn(game.state)
        parsed = chess.pgn.read_game(io.StringIO(text))
        assert parsed.headers["FEN"] == fen
        assert "a8=N" in text

    def test_draw_result(self):
        game = Game.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 99 60")
        game.make_move("a1a2")
        assert '[Result "1/2-1/2"]' in game.pgn()


# ════════════════════════════════════════════════════════════════════════════
#  TERMINAL FRONT END
# ════════════════════════════════════════════════════════════════════════════


class TestCli:
    def test_render(self):
        lines = render(Game()).splitlines()
        assert lines[0] == "8 r n b q k b n r"
        assert lines[7] == "1 R N B Q K B N R"
        assert lines[-1] == "  a b c d e f g h"
        assert "♜" in render(Game(), unicode_pieces=True)

    def test_parser(self):
        args = build_parser().parse_args(["--difficulty", "hard", "--color", "dark"])
        assert args.difficulty == "hard"
        assert args.color == "dark"
        assert args.fen is None

    def test_parser_rejects_unknown_difficulty(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--difficulty", "impossible"])

    def test_engine_delivers_mate(self, capsys):
        main(["--fen", "6k1/5ppp/8/8/8/8/8/R3K3 w - - 0 1", "--color", "dark",
              "--difficulty", "easy"])
        out = capsys.readouterr().out
        assert "Ra8#" in out
        assert "Game Over" in out
        assert "Light wins by checkmate" in out

    def test_quit(self, capsys, monkeypatch):
        monkeypatch.setattr(builtins, "input", lambda prompt="": "quit")
        main([])
        out = capsys.readouterr().out
        assert "Game stopped" in out

    def test_illegal_then_undo(self, capsys, monkeypatch):
        replies = iter(["e2e5", "undo", "quit"])
        monkeypatch.setattr(builtins, "input", lambda prompt="": next(replies))
        main([])
        out = capsys.readouterr().out
        assert "Illegal move, try again." in out
