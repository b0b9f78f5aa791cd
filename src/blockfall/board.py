"""Board representation for the playfield.

Cells are stored in two flat arrays indexed by ``col + row * cols``: a
boolean occupancy array and a parallel array of colors.  Row ``0`` is the
topmost hidden row; the visible playfield starts at ``hidden_rows``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .piece import ActivePiece, Color


LOGGER = logging.getLogger(__name__)

# Dimensions of the default board.
DEFAULT_COLS = 10
DEFAULT_ROWS = 20
HIDDEN_ROWS = 2

# Smallest board on which every kind fits at the spawn anchor.
MIN_COLS = 5
MIN_ROWS = 4

EMPTY_COLOR: Color = "#ffffff"


class ValidityResult(Enum):
    """Outcome of testing a piece position against the board."""

    VALID = "valid"
    OUT_OF_BOUNDS = "out_of_bounds"
    INTERSECTS_BLOCK = "intersects_block"


def check_dimensions(cols: int, visible_rows: int) -> None:
    """Raise ``ValueError`` for boards too small to play on."""

    if cols < MIN_COLS or visible_rows < MIN_ROWS:
        raise ValueError(
            f"Board must be at least {MIN_COLS}x{MIN_ROWS}, got {cols}x{visible_rows}"
        )


class Board:
    """Grid of cells including the hidden rows above the playfield."""

    def __init__(
        self,
        cols: int = DEFAULT_COLS,
        visible_rows: int = DEFAULT_ROWS,
        hidden_rows: int = HIDDEN_ROWS,
    ) -> None:
        check_dimensions(cols, visible_rows)
        self.cols = cols
        self.visible_rows = visible_rows
        self.hidden_rows = hidden_rows
        size = cols * self.rows
        self.filled: NDArray[np.bool_] = np.zeros(size, dtype=np.bool_)
        self.colors: NDArray[np.object_] = np.full(size, EMPTY_COLOR, dtype=object)

    @property
    def rows(self) -> int:
        """Total row count, hidden rows included."""

        return self.visible_rows + self.hidden_rows

    def index(self, col: int, row: int) -> int:
        return col + row * self.cols

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.cols and 0 <= row < self.rows

    def _checked_index(self, col: int, row: int) -> int:
        if not self.in_bounds(col, row):
            raise IndexError("Cell out of bounds")
        return self.index(col, row)

    def is_filled(self, col: int, row: int) -> bool:
        """Return whether ``(col, row)`` holds a locked block.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        return bool(self.filled[self._checked_index(col, row)])

    def color_at(self, col: int, row: int) -> Color:
        """Return the color stored at ``(col, row)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        return self.colors[self._checked_index(col, row)]

    def set_cell(
        self, col: int, row: int, filled: bool, color: Optional[Color] = None
    ) -> None:
        """Set the cell at ``(col, row)``; the color is kept when omitted.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        idx = self._checked_index(col, row)
        self.filled[idx] = filled
        if color is not None:
            self.colors[idx] = color

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.filled))

    def clear(self) -> None:
        """Empty every cell; colors are left as they were."""

        self.filled[:] = False

    def validity(self, piece: ActivePiece, dcol: int = 0, drow: int = 0) -> ValidityResult:
        """Test ``piece`` translated by ``(dcol, drow)`` without moving it.

        Masked cells are checked in row-major order and the first failure
        decides the result, so a piece hanging off the board reports
        ``OUT_OF_BOUNDS`` even if another of its cells overlaps a block.
        """

        for col, row in piece.cells():
            col += dcol
            row += drow
            if not self.in_bounds(col, row):
                return ValidityResult.OUT_OF_BOUNDS
            if self.filled[self.index(col, row)]:
                return ValidityResult.INTERSECTS_BLOCK
        return ValidityResult.VALID

    def is_valid(self, piece: ActivePiece, dcol: int = 0, drow: int = 0) -> bool:
        return self.validity(piece, dcol, drow) is ValidityResult.VALID

    def lock_piece(self, piece: ActivePiece) -> None:
        """Merge the piece's blocks into the grid.

        Raises:
            IndexError: If a block falls outside the board.
        """

        for col, row in piece.cells():
            self.set_cell(col, row, True, piece.color)

    def row_is_full(self, row: int) -> bool:
        start = row * self.cols
        return bool(np.all(self.filled[start : start + self.cols]))

    def _remove_row(self, row: int) -> None:
        # Everything above ``row`` moves down by exactly one row.
        end = row * self.cols
        self.filled[self.cols : end + self.cols] = self.filled[0:end].copy()
        self.colors[self.cols : end + self.cols] = self.colors[0:end].copy()
        self.filled[0 : self.cols] = False

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed.

        Rows are scanned from the bottom up.  After a row is removed the same
        row index is examined again, since the row shifted into it may be
        full as well.
        """

        cleared = 0
        row = self.rows - 1
        while row >= 0:
            if self.row_is_full(row):
                self._remove_row(row)
                cleared += 1
            else:
                row -= 1
        if cleared:
            LOGGER.debug("Cleared %d row(s)", cleared)
        return cleared

    def resized(self, cols: int, visible_rows: int) -> "Board":
        """Return a new board of the given size holding this board's overlap.

        Cells are copied into the new board's top-left region; any cell not
        covered by the old board starts out empty.
        """

        board = Board(cols, visible_rows, self.hidden_rows)
        keep_cols = min(cols, self.cols)
        keep_rows = min(board.rows, self.rows)
        old_filled = self.filled.reshape(self.rows, self.cols)
        old_colors = self.colors.reshape(self.rows, self.cols)
        new_filled = board.filled.reshape(board.rows, board.cols)
        new_colors = board.colors.reshape(board.rows, board.cols)
        new_filled[:keep_rows, :keep_cols] = old_filled[:keep_rows, :keep_cols]
        new_colors[:keep_rows, :keep_cols] = old_colors[:keep_rows, :keep_cols]
        return board
