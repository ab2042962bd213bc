"""Zobrist hashing keys and the cuckoo table of reversible moves."""

from __future__ import annotations

from dataclasses import dataclass

from .attacks import attacks, square_bb
from .types import (
    CASTLING_RIGHT_NB,
    FILE_NB,
    MASK64,
    MOVE_NONE,
    PIECE_NB,
    PIECES,
    SQUARE_NB,
    PieceType,
    make_move,
    type_of,
)

DEFAULT_SEED = 1070372
CUCKOO_SIZE = 8192


class _Prng:
    """xorshift64* pseudo random number generator."""

    def __init__(self, seed: int) -> None:
        if not seed & MASK64:
            raise ValueError("seed must be non-zero")
        self._state = seed & MASK64

    def rand(self) -> int:
        s = self._state
        s ^= s >> 12
        s ^= (s << 25) & MASK64
        s ^= s >> 27
        self._state = s
        return (s * 2685821657736338717) & MASK64


@dataclass(frozen=True)
class ZobristKeys:
    """Random keys for pieces on squares, en passant files, castling and side."""

    psq: tuple[tuple[int, ...], ...]
    enpassant: tuple[int, ...]
    castling: tuple[int, ...]
    side: int
    no_pawns: int


def build_keys(seed: int = DEFAULT_SEED) -> ZobristKeys:
    """Draw every Zobrist key from a generator started with the seed."""
    rng = _Prng(seed)
    psq = [[0] * SQUARE_NB for _ in range(PIECE_NB)]
    for pc in PIECES:
        for sq in range(SQUARE_NB):
            psq[pc][sq] = rng.rand()
    enpassant = tuple(rng.rand() for _ in range(FILE_NB))
    castling = tuple(rng.rand() for _ in range(CASTLING_RIGHT_NB))
    side = rng.rand()
    no_pawns = rng.rand()
    return ZobristKeys(
        psq=tuple(tuple(row) for row in psq),
        enpassant=enpassant,
        castling=castling,
        side=side,
        no_pawns=no_pawns,
    )


def h1(key: int) -> int:
    """First cuckoo slot for a key."""
    return key & 0x1FFF


def h2(key: int) -> int:
    """Second cuckoo slot for a key."""
    return (key >> 16) & 0x1FFF


@dataclass(frozen=True)
class CuckooTable:
    """Hashes of reversible piece moves, for spotting upcoming repetitions."""

    keys: tuple[int, ...]
    moves: tuple[int, ...]
    count: int

    def lookup(self, key: int) -> int | None:
        """The move whose hash is key, or None if there is none."""
        for slot in (h1(key), h2(key)):
            if self.keys[slot] == key:
                move = self.moves[slot]
                return None if move == MOVE_NONE else move
        return None


def build_cuckoo(keys: ZobristKeys | None = None) -> CuckooTable:
    """Fill the cuckoo table with every non-pawn move between two squares."""
    if keys is None:
        keys = build_keys()
    table = [0] * CUCKOO_SIZE
    moves = [MOVE_NONE] * CUCKOO_SIZE
    count = 0
    for pc in PIECES:
        kind = type_of(pc)
        if kind == PieceType.PAWN:
            continue
        for s1 in range(SQUARE_NB):
            reach = attacks(kind, s1, 0)
            for s2 in range(s1 + 1, SQUARE_NB):
                if not reach & square_bb(s2):
                    continue
                move = make_move(s1, s2)
                key = keys.psq[pc][s1] ^ keys.psq[pc][s2] ^ keys.side
                slot = h1(key)
                while True:
                    table[slot], key = key, table[slot]
                    moves[slot], move = move, moves[slot]
                    if move == MOVE_NONE:
                        break
                    slot = h2(key) if slot == h1(key) else h1(key)
                count += 1
    return CuckooTable(keys=tuple(table), moves=tuple(moves), count=count)