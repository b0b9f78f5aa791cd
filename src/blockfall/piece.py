"""Piece definitions and table-driven rotation.

Every piece lives in a 4x4 bounding box stored as a flat array of 16
booleans in row-major order (``index = col + row * 4``).  The base masks,
colors and rotation tables below are created once as read-only numpy arrays
and shared by every :class:`ActivePiece`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, cast

import numpy as np
from numpy.typing import NDArray

Mask = NDArray[np.bool_]
Color = str

BOX_SIZE = 4


class PieceKind(str, Enum):
    """Enumeration of the seven piece kinds."""

    T = "T"
    I = "I"
    L = "L"
    J = "J"
    O = "O"
    S = "S"
    Z = "Z"


def _frozen(values) -> NDArray:
    array = np.array(values)
    array.setflags(write=False)
    return array


def _parse_mask(rows: Tuple[str, str, str, str]) -> Mask:
    return _frozen([char == "#" for row in rows for char in row])


# Spawn orientation of each kind inside its 4x4 box.
_BASE_MASKS: Mapping[PieceKind, Mask] = MappingProxyType(
    {
        PieceKind.T: _parse_mask(("....", "###.", ".#..", "....")),
        PieceKind.I: _parse_mask((".#..", ".#..", ".#..", ".#..")),
        PieceKind.L: _parse_mask(("....", ".#..", ".#..", ".##.")),
        PieceKind.J: _parse_mask(("....", "..#.", "..#.", ".##.")),
        PieceKind.O: _parse_mask(("....", ".##.", ".##.", "....")),
        PieceKind.S: _parse_mask(("....", ".##.", "##..", "....")),
        PieceKind.Z: _parse_mask(("....", "##..", ".##.", "....")),
    }
)

PIECE_COLORS: Mapping[PieceKind, Color] = MappingProxyType(
    {
        PieceKind.T: "#8000ff",
        PieceKind.I: "#00ffff",
        PieceKind.L: "#ff8000",
        PieceKind.J: "#0000ff",
        PieceKind.O: "#ffff00",
        PieceKind.S: "#00ff00",
        PieceKind.Z: "#ff0000",
    }
)

# Permutations mapping each new index to the old index it is read from.
ROTATE_CW_TABLE = _frozen(
    [
        12, 8, 4, 0,
        13, 9, 5, 1,
        14, 10, 6, 2,
        15, 11, 7, 3,
    ]
)
ROTATE_CCW_TABLE = _frozen(
    [
        3, 7, 11, 15,
        2, 6, 10, 14,
        1, 5, 9, 13,
        0, 4, 8, 12,
    ]
)


def base_mask(kind: PieceKind) -> Mask:
    """Return the shared, read-only spawn mask for ``kind``."""

    return _BASE_MASKS[kind]


def piece_color(kind: PieceKind) -> Color:
    """Return the display color for ``kind``."""

    return PIECE_COLORS[kind]


def rotate_cw(mask: Mask) -> Mask:
    """Return ``mask`` rotated 90 degrees clockwise within its box."""

    return mask[ROTATE_CW_TABLE]


def rotate_ccw(mask: Mask) -> Mask:
    """Return ``mask`` rotated 90 degrees counter-clockwise within its box."""

    return mask[ROTATE_CCW_TABLE]


def mask_index(col: int, row: int, width: int = BOX_SIZE) -> int:
    return col + row * width


@dataclass(eq=False)
class ActivePiece:
    """The single falling piece.

    ``col`` and ``row`` anchor the top-left corner of the 4x4 box on the
    board.  ``mask`` starts out as the shared base mask; rotating replaces it
    with a fresh array so the catalog is never written to.
    """

    kind: PieceKind
    col: int = 0
    row: int = 0
    mask: Optional[Mask] = None
    color: Color = ""

    def __post_init__(self) -> None:
        if self.mask is None:
            self.mask = base_mask(self.kind)
        if not self.color:
            self.color = piece_color(self.kind)

    @property
    def shape(self) -> Mask:
        """The current mask; always set once the piece is constructed."""

        return cast(Mask, self.mask)

    def rotate(self, clockwise: bool = True) -> None:
        """Rotate the mask in place; the anchor is left untouched."""

        self.mask = rotate_cw(self.shape) if clockwise else rotate_ccw(self.shape)

    def move(self, dcol: int, drow: int) -> None:
        self.col += dcol
        self.row += drow

    def is_hit(self, col: int, row: int) -> bool:
        """Return ``True`` if board cell ``(col, row)`` is covered by the piece.

        Cells outside the piece's bounding box are never hit.
        """

        local_col = col - self.col
        local_row = row - self.row
        if not (0 <= local_col < BOX_SIZE and 0 <= local_row < BOX_SIZE):
            return False
        return bool(self.shape[mask_index(local_col, local_row)])

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield the board ``(col, row)`` of every masked cell, row-major."""

        for index in np.flatnonzero(self.shape):
            local_row, local_col = divmod(int(index), BOX_SIZE)
            yield self.col + local_col, self.row + local_row

    @property
    def block_count(self) -> int:
        return int(np.count_nonzero(self.shape))
