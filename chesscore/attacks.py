"""Bitboard helpers and attack sets for every piece type."""

from __future__ import annotations

from collections.abc import Iterator

from .types import (
    FILE_NB,
    MASK64,
    RANK_NB,
    SQUARE_NB,
    Color,
    PieceType,
    file_of,
    is_ok_square,
    make_square,
    rank_of,
)

_FILE_A_BB = 0x0101010101010101

_KNIGHT_DELTAS = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
_KING_DELTAS = ((0, 1), (1, 1), (1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1))

# Opposite directions sit next to each other: index ^ 1 is the reverse ray.
_ROOK_DIRS = ((0, 1), (0, -1), (1, 0), (-1, 0))
_BISHOP_DIRS = ((1, 1), (-1, -1), (1, -1), (-1, 1))
_ALL_DIRS = _ROOK_DIRS + _BISHOP_DIRS


def _on_board(file: int, rank: int) -> bool:
    return 0 <= file < FILE_NB and 0 <= rank < RANK_NB


def _leaper(square: int, deltas: tuple[tuple[int, int], ...]) -> int:
    f, r = file_of(square), rank_of(square)
    bb = 0
    for df, dr in deltas:
        if _on_board(f + df, r + dr):
            bb |= 1 << make_square(f + df, r + dr)
    return bb


def _ray(square: int, df: int, dr: int) -> tuple[int, ...]:
    f, r = file_of(square) + df, rank_of(square) + dr
    squares = []
    while _on_board(f, r):
        squares.append(make_square(f, r))
        f, r = f + df, r + dr
    return tuple(squares)


_KNIGHT = tuple(_leaper(s, _KNIGHT_DELTAS) for s in range(SQUARE_NB))
_KING = tuple(_leaper(s, _KING_DELTAS) for s in range(SQUARE_NB))
_PAWN = (
    tuple(_leaper(s, ((-1, 1), (1, 1))) for s in range(SQUARE_NB)),
    tuple(_leaper(s, ((-1, -1), (1, -1))) for s in range(SQUARE_NB)),
)
_RAYS = {d: tuple(_ray(s, *d) for s in range(SQUARE_NB)) for d in _ALL_DIRS}


def _build_lines() -> tuple[list[list[int]], list[list[int]]]:
    line = [[0] * SQUARE_NB for _ in range(SQUARE_NB)]
    between_table = [[1 << s2 for s2 in range(SQUARE_NB)] for _ in range(SQUARE_NB)]
    for s1 in range(SQUARE_NB):
        for i, direction in enumerate(_ALL_DIRS):
            opposite = _ALL_DIRS[i ^ 1]
            full = 1 << s1
            for sq in _RAYS[direction][s1] + _RAYS[opposite][s1]:
                full |= 1 << sq
            segment = 0
            for sq in _RAYS[direction][s1]:
                segment |= 1 << sq
                line[s1][sq] = full
                between_table[s1][sq] = segment
    return line, between_table


_LINE, _BETWEEN = _build_lines()


def square_bb(square: int) -> int:
    """Bitboard with only the given square set."""
    if not is_ok_square(square):
        raise ValueError(f"invalid square: {square}")
    return 1 << square


def popcount(bb: int) -> int:
    """Number of squares set in a bitboard."""
    return bin(bb & MASK64).count("1")


def lsb(bb: int) -> int:
    """Lowest square set in a non-empty bitboard."""
    if not bb:
        raise ValueError("empty bitboard has no least significant square")
    return (bb & -bb).bit_length() - 1


def iter_squares(bb: int) -> Iterator[int]:
    """Squares set in a bitboard, from the lowest up."""
    bb &= MASK64
    while bb:
        low = bb & -bb
        yield low.bit_length() - 1
        bb ^= low


def more_than_one(bb: int) -> bool:
    return bool(bb & (bb - 1))


def file_bb(square: int) -> int:
    """All squares on the file of the given square."""
    return _FILE_A_BB << file_of(square)


def pawn_attacks(color: Color, square: int) -> int:
    return _PAWN[int(color)][square]


def knight_attacks(square: int) -> int:
    return _KNIGHT[square]


def king_attacks(square: int) -> int:
    return _KING[square]


def _slide(square: int, occupied: int, directions: tuple[tuple[int, int], ...]) -> int:
    bb = 0
    for direction in directions:
        for sq in _RAYS[direction][square]:
            bb |= 1 << sq
            if occupied >> sq & 1:
                break
    return bb


def bishop_attacks(square: int, occupied: int = 0) -> int:
    return _slide(square, occupied, _BISHOP_DIRS)


def rook_attacks(square: int, occupied: int = 0) -> int:
    return _slide(square, occupied, _ROOK_DIRS)


def attacks(piece_type: PieceType, square: int, occupied: int = 0) -> int:
    """Attack set of a non-pawn piece type on a square."""
    if piece_type == PieceType.KNIGHT:
        return _KNIGHT[square]
    if piece_type == PieceType.BISHOP:
        return bishop_attacks(square, occupied)
    if piece_type == PieceType.ROOK:
        return rook_attacks(square, occupied)
    if piece_type == PieceType.QUEEN:
        return bishop_attacks(square, occupied) | rook_attacks(square, occupied)
    if piece_type == PieceType.KING:
        return _KING[square]
    raise ValueError(f"no colourless attack set for {piece_type!r}")


def between(s1: int, s2: int) -> int:
    """Squares from s1 (excluded) to s2 (included) along a line.

    If the squares share no rank, file or diagonal, only s2 is set.
    """
    return _BETWEEN[s1][s2]


def aligned(s1: int, s2: int, s3: int) -> bool:
    """True if the three squares lie on one rank, file or diagonal."""
    return bool(_LINE[s1][s2] & (1 << s3))


def square_name(square: int) -> str:
    """Algebraic name of a square, such as 'e4'."""
    if not is_ok_square(square):
        raise ValueError(f"invalid square: {square}")
    return "abcdefgh"[file_of(square)] + str(rank_of(square) + 1)


def parse_square(text: str) -> int:
    """Square index from its algebraic name."""
    if len(text) != 2 or text[0] not in "abcdefgh" or text[1] not in "12345678":
        raise ValueError(f"invalid square name: {text!r}")
    return make_square(ord(text[0]) - ord("a"), ord(text[1]) - ord("1"))