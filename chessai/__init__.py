"""chessai: a chess rules engine with a minimax / alpha-beta opponent."""

__version__ = "1.0.0"
