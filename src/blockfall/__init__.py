"""Falling-block puzzle simulation core."""

from .board import Board, ValidityResult
from .piece import (
    ActivePiece,
    PieceKind,
    base_mask,
    piece_color,
    rotate_ccw,
    rotate_cw,
)
from .messages import StatusMessage
from .game import GameController
from .utils import board_dimensions, format_grid, render_grid

__all__ = [
    "Board",
    "ValidityResult",
    "ActivePiece",
    "PieceKind",
    "GameController",
    "StatusMessage",
    "base_mask",
    "piece_color",
    "rotate_cw",
    "rotate_ccw",
    "board_dimensions",
    "format_grid",
    "render_grid",
]
