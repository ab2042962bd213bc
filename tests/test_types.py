import pytest

from chesscore.types import (
    EG,
    KNIGHT_VALUE_MG,
    MG,
    MOVE_NONE,
    MOVE_NULL,
    NORTH,
    PAWN_VALUE_EG,
    PIECES,
    SOUTH,
    SQ_A1,
    SQ_A8,
    SQ_H1,
    SQ_H8,
    SQ_NONE,
    VALUE_MATE,
    CastlingRights,
    Color,
    MoveType,
    Piece,
    PieceType,
    castling_for,
    color_of,
    eg_value,
    file_of,
    flip_file,
    flip_rank,
    from_sq,
    from_to,
    is_ok_move,
    is_ok_square,
    make,
    make_key,
    make_move,
    make_piece,
    make_score,
    mate_in,
    mated_in,
    mg_value,
    move_type,
    pawn_push,
    piece_value,
    promotion_type,
    rank_of,
    relative_rank,
    relative_square,
    swap_color,
    to_sq,
    type_of,
)


@pytest.mark.parametrize("mg,eg", [(0, 0), (126, 208), (-175, -96), (32000, -32000), (-1, 1), (2538, 2682)])
def test_score_round_trip(mg, eg):
    s = make_score(mg, eg)
    assert mg_value(s) == mg
    assert eg_value(s) == eg


def test_score_is_additive_and_negatable():
    a = make_score(-175, -96)
    b = make_score(781, 854)
    total = a + b
    assert mg_value(total) == -175 + 781
    assert eg_value(total) == -96 + 854
    assert mg_value(-a) == 175
    assert eg_value(-a) == 96


def test_mate_values():
    assert mate_in(0) == VALUE_MATE
    assert mated_in(0) == -VALUE_MATE
    assert mate_in(5) == -mated_in(5)


def test_square_round_trip():
    for sq in range(64):
        assert (file_of(sq), rank_of(sq)) == (sq % 8, sq // 8)
        assert flip_rank(flip_rank(sq)) == sq
        assert flip_file(flip_file(sq)) == sq


def test_flips_of_corners():
    assert flip_rank(SQ_A1) == SQ_A8
    assert flip_file(SQ_A1) == SQ_H1
    assert relative_square(Color.BLACK, SQ_H1) == SQ_H8
    assert relative_square(Color.WHITE, SQ_H1) == SQ_H1


def test_relative_rank_and_push():
    assert relative_rank(Color.BLACK, 0) == 7
    assert relative_rank(Color.WHITE, 5) == 5
    assert pawn_push(Color.WHITE) == NORTH
    assert pawn_push(Color.BLACK) == SOUTH


def test_square_validity():
    assert is_ok_square(SQ_A1)
    assert is_ok_square(SQ_H8)
    assert not is_ok_square(SQ_NONE)
    assert not is_ok_square(-1)


def test_piece_composition():
    for pc in PIECES:
        assert make_piece(color_of(pc), type_of(pc)) == pc
        assert swap_color(swap_color(pc)) == pc
        assert color_of(swap_color(pc)) == ~color_of(pc)
    assert make_piece(Color.BLACK, PieceType.QUEEN) == Piece.B_QUEEN


def test_color_of_empty_raises():
    with pytest.raises(ValueError):
        color_of(Piece.NO_PIECE)


def test_color_invert():
    assert ~color_of(Piece.W_KNIGHT) is Color.BLACK
    assert ~color_of(Piece.B_KNIGHT) is Color.WHITE
    assert color_of(make_piece(~Color.WHITE, PieceType.ROOK)) is Color.BLACK


def test_move_encoding_round_trip():
    for origin, target in [(12, 28), (0, 63), (63, 0), (52, 36)]:
        m = make_move(origin, target)
        assert from_sq(m) == origin
        assert to_sq(m) == target
        assert from_to(m) == m
        assert move_type(m) is MoveType.NORMAL
        assert is_ok_move(m)


@pytest.mark.parametrize("pt", [PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN])
def test_promotion_encoding(pt):
    m = make(MoveType.PROMOTION, 52, 60, pt)
    assert promotion_type(m) == pt
    assert move_type(m) is MoveType.PROMOTION
    assert (from_sq(m), to_sq(m)) == (52, 60)


def test_special_move_types():
    assert move_type(make(MoveType.CASTLING, 4, 7)) is MoveType.CASTLING
    assert move_type(make(MoveType.EN_PASSANT, 36, 43)) is MoveType.EN_PASSANT


def test_null_and_none_moves_are_not_ok():
    assert not is_ok_move(MOVE_NONE)
    assert not is_ok_move(MOVE_NULL)


def test_make_key():
    assert make_key(0) == 1442695040888963407
    assert 0 <= make_key(2**63 + 12345) < 2**64


def test_piece_values():
    assert piece_value(MG, Piece.W_KNIGHT) == KNIGHT_VALUE_MG
    assert piece_value(EG, Piece.B_PAWN) == PAWN_VALUE_EG
    assert piece_value(MG, Piece.W_KING) == 0
    assert piece_value(MG, Piece.B_QUEEN) == piece_value(MG, Piece.W_QUEEN)


def test_castling_for():
    assert castling_for(Color.WHITE, CastlingRights.ANY_CASTLING) == CastlingRights.WHITE_CASTLING
    assert castling_for(Color.BLACK, CastlingRights.KING_SIDE) == CastlingRights.BLACK_OO
    assert castling_for(Color.WHITE, CastlingRights.BLACK_CASTLING) == CastlingRights.NO_CASTLING