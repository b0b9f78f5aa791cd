from __future__ import annotations

import pytest

from blockfall.board import Board, ValidityResult
from blockfall.piece import ActivePiece, PieceKind


def _fill_row(board: Board, row: int, skip: tuple[int, ...] = ()) -> None:
    for col in range(board.cols):
        if col not in skip:
            board.set_cell(col, row, True, "#abcdef")


def test_cells_are_addressed_column_first() -> None:
    board = Board(5, 6, hidden_rows=2)
    assert board.rows == 8
    assert board.index(3, 2) == 3 + 2 * 5
    board.set_cell(3, 2, True, "#123456")
    assert board.filled[13]
    assert board.is_filled(3, 2)
    assert board.color_at(3, 2) == "#123456"


def test_out_of_range_access_raises() -> None:
    board = Board(5, 4, hidden_rows=0)
    with pytest.raises(IndexError):
        board.is_filled(5, 0)
    with pytest.raises(IndexError):
        board.set_cell(0, -1, True)


def test_too_small_board_rejected() -> None:
    with pytest.raises(ValueError):
        Board(4, 10)
    with pytest.raises(ValueError):
        Board(10, 3)


def test_validity_distinguishes_walls_from_blocks() -> None:
    board = Board(10, 20, hidden_rows=0)
    piece = ActivePiece(PieceKind.O, col=0, row=0)
    assert board.validity(piece) is ValidityResult.VALID
    assert board.validity(piece, dcol=-2) is ValidityResult.OUT_OF_BOUNDS
    assert board.validity(piece, drow=18) is ValidityResult.OUT_OF_BOUNDS

    board.set_cell(2, 2, True)
    assert board.validity(piece) is ValidityResult.INTERSECTS_BLOCK
    assert not board.is_valid(piece)
    assert board.is_valid(piece, dcol=3)


def test_single_full_row_removed_and_rows_above_shift_down() -> None:
    board = Board(5, 6, hidden_rows=0)
    _fill_row(board, 5)
    board.set_cell(0, 4, True, "#123456")

    assert board.clear_full_rows() == 1
    assert board.is_filled(0, 5)
    assert board.color_at(0, 5) == "#123456"
    assert not any(board.is_filled(col, 5) for col in range(1, 5))
    assert board.filled_count() == 1


def test_row_shifted_into_place_is_rescanned() -> None:
    board = Board(5, 6, hidden_rows=0)
    _fill_row(board, 5)
    _fill_row(board, 4)
    board.set_cell(1, 3, True)

    assert board.clear_full_rows() == 2
    assert board.is_filled(1, 5)
    assert board.filled_count() == 1


def test_separated_full_rows_cleared_in_one_pass() -> None:
    board = Board(5, 6, hidden_rows=0)
    _fill_row(board, 5)
    _fill_row(board, 4, skip=(2,))
    _fill_row(board, 3)

    assert board.clear_full_rows() == 2
    assert [board.is_filled(col, 5) for col in range(5)] == [True, True, False, True, True]
    assert board.filled_count() == 4


def test_hidden_rows_take_part_in_clearing() -> None:
    board = Board(5, 4, hidden_rows=2)
    _fill_row(board, 0)
    assert board.clear_full_rows() == 1
    assert board.filled_count() == 0


def test_lock_piece_writes_color() -> None:
    board = Board(10, 20, hidden_rows=0)
    piece = ActivePiece(PieceKind.S, col=2, row=10)
    board.lock_piece(piece)
    assert board.filled_count() == 4
    for col, row in piece.cells():
        assert board.color_at(col, row) == piece.color


def test_resized_copies_top_left_overlap() -> None:
    board = Board(5, 6, hidden_rows=0)
    board.set_cell(1, 1, True, "#111111")
    board.set_cell(3, 5, True)

    bigger = board.resized(7, 8)
    assert (bigger.cols, bigger.rows) == (7, 8)
    assert bigger.is_filled(1, 1)
    assert bigger.color_at(1, 1) == "#111111"
    assert bigger.is_filled(3, 5)
    assert not bigger.is_filled(6, 7)

    smaller = board.resized(5, 4)
    assert smaller.filled_count() == 1
