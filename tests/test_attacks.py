import pytest

from chesscore.attacks import (
    aligned,
    attacks,
    between,
    bishop_attacks,
    file_bb,
    iter_squares,
    king_attacks,
    knight_attacks,
    lsb,
    more_than_one,
    parse_square,
    pawn_attacks,
    popcount,
    rook_attacks,
    square_bb,
    square_name,
)
from chesscore.types import Color, PieceType, file_of

ALL = range(64)


def test_square_name_round_trip():
    for sq in ALL:
        assert parse_square(square_name(sq)) == sq


def test_square_name_pinned():
    assert square_name(0) == "a1"
    assert square_name(63) == "h8"


@pytest.mark.parametrize("bad", ["", "i1", "a9", "e44", "E4"])
def test_parse_square_rejects(bad):
    with pytest.raises(ValueError):
        parse_square(bad)


def test_square_bb_invalid():
    with pytest.raises(ValueError):
        square_bb(64)


def test_lsb_and_iter():
    bb = square_bb(parse_square("c3")) | square_bb(parse_square("f7"))
    assert lsb(bb) == parse_square("c3")
    assert list(iter_squares(bb)) == [parse_square("c3"), parse_square("f7")]
    assert popcount(bb) == len(list(iter_squares(bb)))
    assert more_than_one(bb)
    assert not more_than_one(square_bb(5))


def test_lsb_empty_raises():
    with pytest.raises(ValueError):
        lsb(0)


def test_file_bb_contains_its_file():
    for sq in ALL:
        assert {file_of(s) for s in iter_squares(file_bb(sq))} == {file_of(sq)}
        assert file_bb(sq) & square_bb(sq)


def test_knight_and_king_symmetry():
    for a in ALL:
        for b in ALL:
            assert bool(knight_attacks(a) & square_bb(b)) == bool(knight_attacks(b) & square_bb(a))
            assert bool(king_attacks(a) & square_bb(b)) == bool(king_attacks(b) & square_bb(a))


def test_knight_corner():
    expected = square_bb(parse_square("b3")) | square_bb(parse_square("c2"))
    assert knight_attacks(parse_square("a1")) == expected


def test_pawn_attacks_mirror():
    for a in ALL:
        for b in ALL:
            assert bool(pawn_attacks(Color.WHITE, a) & square_bb(b)) == bool(
                pawn_attacks(Color.BLACK, b) & square_bb(a)
            )


def test_pawn_attack_edge():
    assert pawn_attacks(Color.WHITE, parse_square("a4")) == square_bb(parse_square("b5"))


def test_queen_is_rook_plus_bishop():
    occ = square_bb(parse_square("d6")) | square_bb(parse_square("f4"))
    for sq in ALL:
        assert attacks(PieceType.QUEEN, sq, occ) == rook_attacks(sq, occ) | bishop_attacks(sq, occ)


def test_rook_blocked_stops_at_blocker():
    d1 = parse_square("d1")
    d4 = parse_square("d4")
    att = rook_attacks(d1, square_bb(d4))
    expected = {parse_square(name) for name in ["a1", "b1", "c1", "e1", "f1", "g1", "h1", "d2", "d3", "d4"]}
    assert set(iter_squares(att)) == expected
    assert (att & square_bb(parse_square("d5"))) == 0


def test_attacks_rejects_pawn():
    with pytest.raises(ValueError):
        attacks(PieceType.PAWN, 10, 0)


def test_between_includes_target_only():
    a1, d4 = parse_square("a1"), parse_square("d4")
    expected = square_bb(parse_square("b2")) | square_bb(parse_square("c3")) | square_bb(d4)
    assert between(a1, d4) == expected


def test_between_unaligned_is_target():
    a1, b3 = parse_square("a1"), parse_square("b3")
    assert between(a1, b3) == square_bb(b3)


def test_between_subset_of_slider_attack():
    for a in ALL:
        for b in ALL:
            if a != b and aligned(a, b, a):
                assert between(a, b) & attacks(PieceType.QUEEN, a, 0) == between(a, b)


def test_aligned():
    assert aligned(parse_square("a1"), parse_square("c3"), parse_square("h8"))
    assert not aligned(parse_square("a1"), parse_square("c3"), parse_square("h7"))
    assert aligned(parse_square("e1"), parse_square("e8"), parse_square("e4"))