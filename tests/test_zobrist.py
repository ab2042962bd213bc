import pytest

from chesscore.attacks import parse_square
from chesscore.types import MOVE_NONE, PIECES, Piece, make_move
from chesscore.zobrist import CUCKOO_SIZE, build_cuckoo, build_keys, h1, h2


@pytest.fixture(scope="module")
def keys():
    return build_keys()


@pytest.fixture(scope="module")
def cuckoo(keys):
    return build_cuckoo(keys)


def test_keys_deterministic(keys):
    assert build_keys() == keys


def test_keys_depend_on_seed(keys):
    assert build_keys(7).side != keys.side


def test_zero_seed_rejected():
    with pytest.raises(ValueError):
        build_keys(0)


def test_piece_keys_distinct(keys):
    values = [keys.psq[pc][sq] for pc in PIECES for sq in range(64)]
    values += list(keys.enpassant) + list(keys.castling) + [keys.side, keys.no_pawns]
    assert len(set(values)) == len(values)
    assert all(0 < v < 1 << 64 for v in values)


def test_unused_piece_slots_are_zero(keys):
    assert set(keys.psq[Piece.NO_PIECE]) == {0}


def test_hash_slots_in_range():
    for key in (0, (1 << 64) - 1, 0x123456789ABCDEF0):
        assert 0 <= h1(key) < CUCKOO_SIZE
        assert 0 <= h2(key) < CUCKOO_SIZE


def test_cuckoo_count(cuckoo):
    assert cuckoo.count == 3668
    assert sum(1 for m in cuckoo.moves if m != MOVE_NONE) == 3668


def test_cuckoo_every_entry_found(cuckoo):
    for key, move in zip(cuckoo.keys, cuckoo.moves):
        if move != MOVE_NONE:
            assert cuckoo.lookup(key) == move


def test_cuckoo_rook_move(keys, cuckoo):
    a1, a8 = parse_square("a1"), parse_square("a8")
    key = keys.psq[Piece.W_ROOK][a1] ^ keys.psq[Piece.W_ROOK][a8] ^ keys.side
    assert cuckoo.lookup(key) == make_move(a1, a8)


def test_cuckoo_pawn_move_absent(keys, cuckoo):
    e2, e3 = parse_square("e2"), parse_square("e3")
    key = keys.psq[Piece.W_PAWN][e2] ^ keys.psq[Piece.W_PAWN][e3] ^ keys.side
    assert cuckoo.lookup(key) is None


def test_cuckoo_default_matches(cuckoo):
    assert build_cuckoo() == cuckoo