"""Exceptions raised by the core. Move requests never raise; they return False."""


class ChessAIError(Exception):
    """Base class for engine errors."""


class FenError(ChessAIError, ValueError):
    """Raised when a FEN string cannot be parsed into a valid position."""


class StateCorruptionError(ChessAIError):
    """Raised when a derived cache disagrees with the board."""
