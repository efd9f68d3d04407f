"""Front ends for the chessai engine."""
