"""Helpers for hosts that draw the game."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .board import MIN_COLS, MIN_ROWS
from .game import GameController
from .piece import Color


BLOCK_PIXEL_SIZE = 14


def board_dimensions(
    width_px: float, height_px: float, block_px: int = BLOCK_PIXEL_SIZE
) -> Tuple[int, int]:
    """Return the ``(cols, visible_rows)`` fitting a drawing area.

    The result is clamped to the smallest playable board so a window shrunk
    to nothing still yields a valid :meth:`GameController.resize` target.
    """

    cols = int(width_px // block_px)
    rows = int(height_px // block_px)
    return max(MIN_COLS, cols), max(MIN_ROWS, rows)


def render_grid(game: GameController) -> List[List[Optional[Color]]]:
    """Return the visible playfield as rows of colors.

    Empty cells are ``None``.  Locked blocks win over the active piece, the
    same precedence a host drawing cell by cell would use.  The hidden rows
    are never included and nothing here writes back into the game.
    """

    grid: List[List[Optional[Color]]] = []
    for row in range(game.visible_rows):
        line: List[Optional[Color]] = []
        for col in range(game.cols):
            if game.is_filled(col, row):
                line.append(game.color_at(col, row))
            elif game.is_active_at(col, row):
                line.append(game.active.color)  # type: ignore[union-attr]
            else:
                line.append(None)
        grid.append(line)
    return grid


def format_grid(game: GameController) -> str:
    """Render the visible playfield as ASCII (``#`` locked, ``@`` active)."""

    lines = []
    for row in range(game.visible_rows):
        chars = []
        for col in range(game.cols):
            if game.is_filled(col, row):
                chars.append("#")
            elif game.is_active_at(col, row):
                chars.append("@")
            else:
                chars.append(".")
        lines.append("".join(chars))
    return "\n".join(lines)
