"""Core chess types: colours, pieces, squares, moves, scores and values."""

from __future__ import annotations

from enum import IntEnum, IntFlag

MASK64 = (1 << 64) - 1

MAX_MOVES = 256
MAX_PLY = 246


class Color(IntEnum):
    """Side colour."""

    WHITE = 0
    BLACK = 1

    def __invert__(self) -> "Color":
        return Color(self ^ 1)


COLOR_NB = 2


class PieceType(IntEnum):
    """Kind of piece, independent of colour."""

    NO_PIECE_TYPE = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6
    ALL_PIECES = 0


PIECE_TYPE_NB = 8


class Piece(IntEnum):
    """Coloured piece; black pieces have bit 3 set."""

    NO_PIECE = 0
    W_PAWN = 1
    W_KNIGHT = 2
    W_BISHOP = 3
    W_ROOK = 4
    W_QUEEN = 5
    W_KING = 6
    B_PAWN = 9
    B_KNIGHT = 10
    B_BISHOP = 11
    B_ROOK = 12
    B_QUEEN = 13
    B_KING = 14


PIECE_NB = 16

PIECES = (
    Piece.W_PAWN, Piece.W_KNIGHT, Piece.W_BISHOP, Piece.W_ROOK, Piece.W_QUEEN, Piece.W_KING,
    Piece.B_PAWN, Piece.B_KNIGHT, Piece.B_BISHOP, Piece.B_ROOK, Piece.B_QUEEN, Piece.B_KING,
)


class MoveType(IntEnum):
    """Special move flag stored in bits 14-15 of a move."""

    NORMAL = 0
    PROMOTION = 1 << 14
    EN_PASSANT = 2 << 14
    CASTLING = 3 << 14


class CastlingRights(IntFlag):
    """Castling right bits and their usual combinations."""

    NO_CASTLING = 0
    WHITE_OO = 1
    WHITE_OOO = 2
    BLACK_OO = 4
    BLACK_OOO = 8
    KING_SIDE = 5
    QUEEN_SIDE = 10
    WHITE_CASTLING = 3
    BLACK_CASTLING = 12
    ANY_CASTLING = 15


CASTLING_RIGHT_NB = 16


class Bound(IntFlag):
    """Kind of bound a stored search value represents."""

    NONE = 0
    UPPER = 1
    LOWER = 2
    EXACT = 3


# Phases
PHASE_ENDGAME = 0
PHASE_MIDGAME = 128
MG = 0
EG = 1
PHASE_NB = 2

# Scale factors
SCALE_FACTOR_DRAW = 0
SCALE_FACTOR_NORMAL = 64
SCALE_FACTOR_MAX = 128
SCALE_FACTOR_NONE = 255

# Values
VALUE_ZERO = 0
VALUE_DRAW = 0
VALUE_KNOWN_WIN = 10000
VALUE_MATE = 32000
VALUE_INFINITE = 32001
VALUE_NONE = 32002

VALUE_TB_WIN_IN_MAX_PLY = VALUE_MATE - 2 * MAX_PLY
VALUE_TB_LOSS_IN_MAX_PLY = -VALUE_TB_WIN_IN_MAX_PLY
VALUE_MATE_IN_MAX_PLY = VALUE_MATE - MAX_PLY
VALUE_MATED_IN_MAX_PLY = -VALUE_MATE_IN_MAX_PLY

PAWN_VALUE_MG, PAWN_VALUE_EG = 126, 208
KNIGHT_VALUE_MG, KNIGHT_VALUE_EG = 781, 854
BISHOP_VALUE_MG, BISHOP_VALUE_EG = 825, 915
ROOK_VALUE_MG, ROOK_VALUE_EG = 1276, 1380
QUEEN_VALUE_MG, QUEEN_VALUE_EG = 2538, 2682

MIDGAME_LIMIT = 15258
ENDGAME_LIMIT = 3915

_PIECE_VALUE = (
    (0, PAWN_VALUE_MG, KNIGHT_VALUE_MG, BISHOP_VALUE_MG, ROOK_VALUE_MG, QUEEN_VALUE_MG, 0, 0,
     0, PAWN_VALUE_MG, KNIGHT_VALUE_MG, BISHOP_VALUE_MG, ROOK_VALUE_MG, QUEEN_VALUE_MG, 0, 0),
    (0, PAWN_VALUE_EG, KNIGHT_VALUE_EG, BISHOP_VALUE_EG, ROOK_VALUE_EG, QUEEN_VALUE_EG, 0, 0,
     0, PAWN_VALUE_EG, KNIGHT_VALUE_EG, BISHOP_VALUE_EG, ROOK_VALUE_EG, QUEEN_VALUE_EG, 0, 0),
)

# Depths
DEPTH_QS_CHECKS = 0
DEPTH_QS_NO_CHECKS = -1
DEPTH_QS_RECAPTURES = -5
DEPTH_NONE = -6
DEPTH_OFFSET = -7

# Squares are plain ints 0..63, a1 = 0, h8 = 63.
SQ_A1, SQ_B1, SQ_C1, SQ_D1, SQ_E1, SQ_F1, SQ_G1, SQ_H1 = range(8)
SQ_A8, SQ_B8, SQ_C8, SQ_D8, SQ_E8, SQ_F8, SQ_G8, SQ_H8 = range(56, 64)
SQ_NONE = 64
SQUARE_NB = 64

FILE_A, FILE_B, FILE_C, FILE_D, FILE_E, FILE_F, FILE_G, FILE_H = range(8)
FILE_NB = 8
RANK_1, RANK_2, RANK_3, RANK_4, RANK_5, RANK_6, RANK_7, RANK_8 = range(8)
RANK_NB = 8

# Directions
NORTH = 8
EAST = 1
SOUTH = -NORTH
WEST = -EAST
NORTH_EAST = NORTH + EAST
SOUTH_EAST = SOUTH + EAST
SOUTH_WEST = SOUTH + WEST
NORTH_WEST = NORTH + WEST

# Special moves
MOVE_NONE = 0
MOVE_NULL = 65


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def make_score(mg: int, eg: int) -> int:
    """Pack a middlegame and an endgame value into one score."""
    return _int32(((eg & 0xFFFFFFFF) << 16) + mg)


def mg_value(score: int) -> int:
    """Middlegame half of a packed score."""
    return _int16(score)


def eg_value(score: int) -> int:
    """Endgame half of a packed score."""
    return _int16(((score + 0x8000) & 0xFFFFFFFF) >> 16)


def mate_in(ply: int) -> int:
    return VALUE_MATE - ply


def mated_in(ply: int) -> int:
    return -VALUE_MATE + ply


def make_square(file: int, rank: int) -> int:
    return (rank << 3) + file


def make_piece(color: Color, piece_type: PieceType) -> Piece:
    """Combine colour and type; raises ValueError if no such piece exists."""
    return Piece((int(color) << 3) + int(piece_type))


def type_of(piece: int) -> PieceType:
    return PieceType(piece & 7)


def color_of(piece: int) -> Color:
    if piece == Piece.NO_PIECE:
        raise ValueError("an empty square has no colour")
    return Color(piece >> 3)


def swap_color(piece: int) -> Piece:
    """The same piece type with the other colour."""
    return Piece(piece ^ 8)


def flip_rank(square: int) -> int:
    return square ^ SQ_A8


def flip_file(square: int) -> int:
    return square ^ SQ_H1


def file_of(square: int) -> int:
    return square & 7


def rank_of(square: int) -> int:
    return square >> 3


def relative_square(color: Color, square: int) -> int:
    return square ^ (int(color) * 56)


def relative_rank(color: Color, rank: int) -> int:
    return rank ^ (int(color) * 7)


def pawn_push(color: Color) -> int:
    return NORTH if color == Color.WHITE else SOUTH


def from_sq(move: int) -> int:
    return (move >> 6) & 0x3F


def to_sq(move: int) -> int:
    return move & 0x3F


def from_to(move: int) -> int:
    return move & 0xFFF


def move_type(move: int) -> MoveType:
    return MoveType(move & (3 << 14))


def promotion_type(move: int) -> PieceType:
    return PieceType(((move >> 12) & 3) + PieceType.KNIGHT)


def make_move(origin: int, target: int) -> int:
    return (origin << 6) + target


def make(kind: MoveType, origin: int, target: int, piece_type: PieceType = PieceType.KNIGHT) -> int:
    """Encode a move with a special flag and a promotion piece type."""
    return int(kind) + ((int(piece_type) - PieceType.KNIGHT) << 12) + (origin << 6) + target


def is_ok_move(move: int) -> bool:
    """False for MOVE_NONE and MOVE_NULL, whose squares coincide."""
    return from_sq(move) != to_sq(move)


def is_ok_square(square: int) -> bool:
    return SQ_A1 <= square <= SQ_H8


def make_key(seed: int) -> int:
    """A 64-bit key from a seed, by one linear congruential step."""
    return (seed * 6364136223846793005 + 1442695040888963407) & MASK64


def piece_value(phase: int, piece: int) -> int:
    """Material value of a piece in the given phase (MG or EG)."""
    return _PIECE_VALUE[phase][piece]


def castling_for(color: Color, rights: int) -> CastlingRights:
    """The part of the given rights that belongs to one colour."""
    side = CastlingRights.WHITE_CASTLING if color == Color.WHITE else CastlingRights.BLACK_CASTLING
    return CastlingRights(side & int(rights))