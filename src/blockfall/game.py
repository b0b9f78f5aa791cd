"""Game controller driving the falling-block simulation.

The host owns the frame loop: it calls :meth:`GameController.tick` with a
monotonic timestamp, forwards key presses to the move/rotate/slam methods
and reads the board, counters and status message back for drawing.  Every
call runs to completion; nothing here blocks or spawns threads.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Optional

from .board import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    HIDDEN_ROWS,
    Board,
    check_dimensions,
)
from .messages import EMPTY_MESSAGE, FOREVER, LONG, SHORT, StatusMessage
from .piece import ActivePiece, Color, PieceKind


LOGGER = logging.getLogger(__name__)

FALL_SPEED = 2.0  # cells per second
LOCK_DELAY_ATTEMPTS = 2

# Anchor offsets tried after a rotation, unshifted first.
KICK_OFFSETS = (0, 1, -1)

# Cardinal single-step offsets checked for a T-spin, as (col, row).
T_SPIN_OFFSETS = ((0, 1), (0, -1), (1, 0), (-1, 0))

TETRIS_ROWS = 4
CHEAT_COLOR: Color = "#ff00ff"

MESSAGE_COLORS = {
    "reset": "#ffffff",
    "game_over": "#ff0000",
    "highlight": "#00ffff",
    "cheat": "#ff80ff",
}


class GameController:
    """Owns the board and the active piece and applies the game rules.

    Blocked moves and rotations are ordinary outcomes reported as ``False``.
    Calls made while no piece is active (for example after game over) do
    nothing and report ``True``.
    """

    def __init__(
        self,
        cols: int = DEFAULT_COLS,
        rows: int = DEFAULT_ROWS,
        *,
        hidden_rows: int = HIDDEN_ROWS,
        fall_speed: float = FALL_SPEED,
        lock_delay_attempts: int = LOCK_DELAY_ATTEMPTS,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if fall_speed <= 0:
            raise ValueError(f"fall_speed must be positive, got {fall_speed}")
        if lock_delay_attempts < 1:
            raise ValueError(
                f"lock_delay_attempts must be at least 1, got {lock_delay_attempts}"
            )
        self._clock = clock
        self._now = 0.0
        self._ticked = False
        self._random = rng or random.Random(seed)
        self.fall_speed = fall_speed
        self.lock_delay_attempts = lock_delay_attempts
        self.board = Board(cols, rows, hidden_rows)
        self.active: Optional[ActivePiece] = None
        self.message: StatusMessage = EMPTY_MESSAGE
        self.rows_cleared = 0
        self.t_spin_count = 0
        self.last_down_time = 0.0
        self.failed_down_attempts = 0
        self.is_playing = True
        self.spawn()

    # Queries ----------------------------------------------------------
    @property
    def cols(self) -> int:
        return self.board.cols

    @property
    def visible_rows(self) -> int:
        return self.board.visible_rows

    @property
    def is_game_over(self) -> bool:
        return not self.is_playing

    def current_message(self, now: Optional[float] = None) -> Optional[StatusMessage]:
        """Return the status message, or ``None`` once it has expired."""

        now = self._time() if now is None else now
        if not self.message.text or self.message.is_expired(now):
            return None
        return self.message

    def is_filled(self, col: int, row: int) -> bool:
        """Return whether visible cell ``(col, row)`` holds a locked block."""

        return self.board.is_filled(col, row + self.board.hidden_rows)

    def color_at(self, col: int, row: int) -> Color:
        return self.board.color_at(col, row + self.board.hidden_rows)

    def is_active_at(self, col: int, row: int) -> bool:
        """Return whether the falling piece covers visible cell ``(col, row)``."""

        if self.active is None:
            return False
        return self.active.is_hit(col, row + self.board.hidden_rows)

    # Internal helpers -------------------------------------------------
    def _time(self) -> float:
        """Return the current game time.

        With an injected ``clock`` that clock is read; otherwise the game
        runs on the timestamps handed to :meth:`tick`, starting at ``0.0``.
        """

        if self._clock is not None:
            self._now = self._clock()
        return self._now

    def _set_message(self, text: str, color: Color, duration: float, now: float) -> None:
        self.message = StatusMessage(text, color, now, duration)

    def _relieve_lock_delay(self) -> None:
        self.failed_down_attempts = max(0, self.failed_down_attempts - 1)

    def _shift(self, dcol: int, drow: int) -> bool:
        piece = self.active
        if piece is None:
            return True
        piece.move(dcol, drow)
        if not self.board.is_valid(piece):
            piece.move(-dcol, -drow)
            return False
        self._relieve_lock_delay()
        return True

    def _move_down(self, now: float) -> bool:
        if self.active is None:
            return True
        # Manual and gravity drops share this timestamp.
        self.last_down_time = now
        return self._shift(0, 1)

    def _rotate(self, clockwise: bool) -> bool:
        piece = self.active
        if piece is None:
            return True

        piece.rotate(clockwise)
        start_col, start_row = piece.col, piece.row
        for row_offset in KICK_OFFSETS:
            for col_offset in KICK_OFFSETS:
                piece.col = start_col + col_offset
                piece.row = start_row + row_offset
                if self.board.is_valid(piece):
                    self._relieve_lock_delay()
                    return True

        piece.col, piece.row = start_col, start_row
        piece.rotate(not clockwise)
        return False

    def _is_t_spin(self, piece: ActivePiece) -> bool:
        return all(
            not self.board.is_valid(piece, dcol, drow) for dcol, drow in T_SPIN_OFFSETS
        )

    def _clear_rows(self, now: float) -> int:
        cleared = self.board.clear_full_rows()
        self.rows_cleared += cleared
        if cleared == TETRIS_ROWS:
            self._set_message("Tetris!", MESSAGE_COLORS["highlight"], LONG, now)
        return cleared

    def _reset_state(self, now: float) -> None:
        self.rows_cleared = 0
        self.t_spin_count = 0
        self.failed_down_attempts = 0
        self.active = None
        self.is_playing = True
        self._set_message("Game Reset", MESSAGE_COLORS["reset"], SHORT, now)

    # Player input -----------------------------------------------------
    def move_left(self) -> bool:
        return self._shift(-1, 0)

    def move_right(self) -> bool:
        return self._shift(1, 0)

    def move_down(self) -> bool:
        return self._move_down(self._time())

    def rotate_cw(self) -> bool:
        """Rotate clockwise, trying small anchor kicks before giving up.

        On failure both the anchor and the mask are restored.
        """

        return self._rotate(True)

    def rotate_ccw(self) -> bool:
        return self._rotate(False)

    def slam_down(self) -> None:
        """Drop the active piece as far as it goes and lock it."""

        if self.active is None:
            return
        now = self._time()
        while self._move_down(now):
            pass
        self.lock_current_piece(now)

    # Simulation -------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> None:
        """Advance gravity to ``now``.

        Elapsed time since the last downward move is converted into whole
        cell steps at ``fall_speed``.  The fractional remainder is carried
        into the next tick so the average fall rate does not drift with the
        host's frame rate.

        Without an injected ``clock`` the timestamps passed here are the only
        time source: moves, spawns and messages between ticks are stamped
        with the latest one.
        """

        now = self._time() if now is None else now
        if self._clock is None and not self._ticked:
            # The first host timestamp becomes the start of the game.
            self.last_down_time = now
        self._ticked = True
        self._now = now
        if not self.is_playing or self.active is None:
            return
        elapsed = now - self.last_down_time
        steps = math.floor(elapsed * self.fall_speed) if elapsed > 0 else 0

        for _ in range(steps):
            if not self._move_down(now):
                self.failed_down_attempts += 1
            if self.failed_down_attempts >= self.lock_delay_attempts:
                break

        if self.failed_down_attempts >= self.lock_delay_attempts:
            self.lock_current_piece(now)
        elif steps:
            self.last_down_time = now - (elapsed - steps / self.fall_speed)

    def lock_current_piece(self, now: Optional[float] = None) -> None:
        """Merge the active piece into the board, clear rows and spawn."""

        piece = self.active
        if piece is None:
            return
        now = self._time() if now is None else now

        if not self.board.is_valid(piece):
            LOGGER.error(
                "Active %s piece at (%d, %d) is in an invalid position, can't lock it",
                piece.kind.value,
                piece.col,
                piece.row,
            )
            self.spawn(now=now)
            return

        if piece.kind is PieceKind.T and self._is_t_spin(piece):
            self.t_spin_count += 1
            self._set_message("T-Spin!", MESSAGE_COLORS["highlight"], LONG, now)

        self.board.lock_piece(piece)
        self.active = None
        LOGGER.debug("Locked %s piece at (%d, %d)", piece.kind.value, piece.col, piece.row)
        self._clear_rows(now)
        self.spawn(now=now)

    def spawn(
        self, kind: Optional[PieceKind] = None, now: Optional[float] = None
    ) -> Optional[ActivePiece]:
        """Spawn a new active piece at the top centre of the board.

        ``kind`` defaults to a uniform draw from the controller's random
        source.  If the spawn position is blocked the game is over and
        ``None`` is returned.
        """

        if not self.is_playing:
            return None
        now = self._time() if now is None else now
        if kind is None:
            kind = self._random.choice(list(PieceKind))

        piece = ActivePiece(kind, col=self.board.cols // 2, row=0)
        self.last_down_time = now
        self.failed_down_attempts = 0

        if not self.board.is_valid(piece):
            self.is_playing = False
            self.active = None
            self._set_message("Game Over!", MESSAGE_COLORS["game_over"], FOREVER, now)
            LOGGER.info("Game over after %d rows cleared", self.rows_cleared)
            return None

        self.active = piece
        LOGGER.debug("Spawned %s piece", kind.value)
        return piece

    def reset(self) -> None:
        """Clear the board and counters and start a new game."""

        now = self._time()
        self.board.clear()
        self._reset_state(now)
        self.spawn(now=now)

    def resize(self, cols: int, rows: int) -> bool:
        """Resize the playfield to ``cols`` by ``rows`` visible cells.

        Overlapping cells are carried into the new grid but the grid is then
        cleared anyway: blocks kept across arbitrary resizes can end up in
        regions the line clear never reaches.  Returns ``False`` when the
        dimensions are unchanged, in which case nothing happens.

        Raises:
            ValueError: If the new size is below the playable minimum.
        """

        check_dimensions(cols, rows)
        if cols == self.board.cols and rows == self.board.visible_rows:
            return False

        LOGGER.debug(
            "Resizing board from %dx%d to %dx%d",
            self.board.cols,
            self.board.visible_rows,
            cols,
            rows,
        )
        now = self._time()
        board = self.board.resized(cols, rows)
        board.clear()
        self.board = board
        self._reset_state(now)
        self.spawn(now=now)
        return True

    def toggle_cell(self, col: int, row: int, filled: bool) -> int:
        """Overwrite visible cell ``(col, row)`` from the host.

        The line clear runs immediately afterwards so an edit that completes
        a row is never left on the board.  Returns the rows cleared.
        """

        now = self._time()
        self.board.set_cell(col, row + self.board.hidden_rows, filled, CHEAT_COLOR)
        self._set_message("Cheater! >_<", MESSAGE_COLORS["cheat"], LONG, now)
        return self._clear_rows(now)
