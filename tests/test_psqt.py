import pytest

from chesscore.psqt import build_table, psq
from chesscore.types import (
    EG,
    MG,
    PIECES,
    SQ_A1,
    SQ_H8,
    Color,
    Piece,
    PieceType,
    color_of,
    eg_value,
    flip_file,
    flip_rank,
    make_score,
    mg_value,
    piece_value,
    swap_color,
    type_of,
)


def test_table_shape():
    table = build_table()
    assert len(table) == 16
    assert all(len(row) == 64 for row in table)


def test_empty_piece_row_is_zero():
    assert all(psq(Piece.NO_PIECE, sq) == 0 for sq in range(64))


def test_black_is_negated_mirror_of_white():
    for pc in PIECES:
        if color_of(pc) != Color.WHITE:
            continue
        for sq in range(64):
            assert psq(swap_color(pc), flip_rank(sq)) == -psq(pc, sq)


@pytest.mark.parametrize("pc", [Piece.W_KNIGHT, Piece.W_BISHOP, Piece.W_ROOK, Piece.W_QUEEN, Piece.W_KING])
def test_non_pawns_are_file_symmetric(pc):
    for sq in range(64):
        assert psq(pc, sq) == psq(pc, flip_file(sq))


def test_knight_corner_bonus_from_table():
    score = psq(Piece.W_KNIGHT, SQ_A1)
    assert mg_value(score) - piece_value(MG, Piece.W_KNIGHT) == -175
    assert eg_value(score) - piece_value(EG, Piece.W_KNIGHT) == -96


def test_king_far_corner_bonus_from_table():
    score = psq(Piece.W_KING, SQ_H8)
    assert mg_value(score) == 59
    assert eg_value(score) == 11


def test_pawn_on_back_rank_is_pure_material():
    base = make_score(piece_value(MG, Piece.W_PAWN), piece_value(EG, Piece.W_PAWN))
    assert psq(Piece.W_PAWN, SQ_A1) == base
    assert psq(Piece.W_PAWN, SQ_H8) == base


def test_table_matches_lookup():
    table = build_table()
    for pc in PIECES:
        assert type_of(pc) != PieceType.NO_PIECE_TYPE
        for sq in range(64):
            assert table[pc][sq] == psq(pc, sq)