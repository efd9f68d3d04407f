"""Core engine components: board state, rules, move execution, status, notation, evaluation and search."""

from .board import Board, Color, GameState, Move, Piece, PieceType
from .evaluator import Evaluator
from .search import SearchEngine, best_move
from .status import GameStatus
