"""Play against the engine in the terminal."""

import argparse
import logging

from chessai.config import CONFIG
from chessai.core.board import Color
from chessai.core.utils import square_name
from chessai.main import Game

UNICODE_PIECES = {
    "K": "♔", "Q": "♕", "R": "♖", "B": "♗", "N": "♘", "P": "♙",
    "k": "♚", "q": "♛", "r": "♜", "b": "♝", "n": "♞", "p": "♟",
}


def render(game: Game, unicode_pieces: bool = False) -> str:
    lines = []
    for row in range(8):
        cells = []
        for col in range(8):
            piece = game.piece_at(row, col)
            if piece is None:
                cells.append(".")
            elif unicode_pieces:
                cells.append(UNICODE_PIECES[piece.symbol()])
            else:
                cells.append(piece.symbol())
        lines.append(f"{8 - row} " + " ".join(cells))
    lines.append("  a b c d e f g h")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"Play chess against {CONFIG.ui.engine_name}")
    parser.add_argument("--difficulty", choices=sorted(CONFIG.search.depth_presets),
                        default=CONFIG.search.difficulty)
    parser.add_argument("--color", choices=["light", "dark"], default=CONFIG.ui.human_color,
                        help="side the human plays")
    parser.add_argument("--fen", default=None, help="start from this position")
    parser.add_argument("--unicode", action="store_true", default=CONFIG.ui.unicode_pieces)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    game = Game(fen=args.fen)
    human = Color.LIGHT if args.color == "light" else Color.DARK

    while not game.is_game_over:
        print(render(game, args.unicode))
        print(game.status_description())
        print("----------------------------")

        if game.side_to_move is human:
            user_move = input("Enter your move (e2e4, 'undo' or 'quit'): ").strip()
            if user_move == "quit":
                break
            if user_move == "undo":
                # take back the engine's reply and our own move
                game.undo()
                game.undo()
                continue
            if not game.make_move(user_move):
                print("Illegal move, try again.")
        else:
            move = game.best_move(args.difficulty)
            if move is None:
                break
            fr, fc, tr, tc = move
            game.apply_move(fr, fc, tr, tc)
            print(f"Engine plays: {square_name((fr, fc))}{square_name((tr, tc))} "
                  f"({game.last_move().san})")

    print(render(game, args.unicode))
    print("Game Over" if game.is_game_over else "Game stopped")
    print(game.status_description())
    print(game.pgn(Event="chessai CLI game"))


if __name__ == "__main__":
    main()
