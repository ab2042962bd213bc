"""Board representation: piece placement, FEN input and output, hash keys and check data."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .attacks import (
    between,
    bishop_attacks,
    file_bb,
    iter_squares,
    king_attacks,
    knight_attacks,
    lsb,
    more_than_one,
    pawn_attacks,
    popcount,
    rook_attacks,
    square_name,
)
from .psqt import psq
from .types import (
    CASTLING_RIGHT_NB,
    FILE_A,
    FILE_H,
    MG,
    PIECE_NB,
    PIECE_TYPE_NB,
    PIECES,
    RANK_1,
    RANK_6,
    SQ_A1,
    SQ_A8,
    SQ_C1,
    SQ_D1,
    SQ_F1,
    SQ_G1,
    SQ_H1,
    SQ_NONE,
    SQUARE_NB,
    CastlingRights,
    Color,
    MoveType,
    Piece,
    PieceType,
    castling_for,
    color_of,
    eg_value,
    file_of,
    from_sq,
    is_ok_square,
    make_key,
    make_piece,
    make_score,
    make_square,
    mg_value,
    move_type,
    pawn_push,
    piece_value,
    rank_of,
    relative_rank,
    relative_square,
    to_sq,
    type_of,
)
from .zobrist import build_keys

PIECE_CHARS = " PNBRQK  pnbrqk"
DARK_SQUARES = 0xAA55AA55AA55AA55
START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

ZOBRIST = build_keys()

_SINGLE_RIGHTS = (
    CastlingRights.WHITE_OO,
    CastlingRights.WHITE_OOO,
    CastlingRights.BLACK_OO,
    CastlingRights.BLACK_OOO,
)
_BORDER = " +---+---+---+---+---+---+---+---+\n"


def _leading_int(text: str) -> int | None:
    digits = ""
    for i, ch in enumerate(text):
        if ch in "0123456789" or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def _opposite_colors(s1: int, s2: int) -> bool:
    return bool((s1 + rank_of(s1) + s2 + rank_of(s2)) & 1)


@dataclass
class StateInfo:
    """Data needed to restore a position when a move is taken back."""

    pawn_key: int = 0
    material_key: int = 0
    non_pawn_material: list[int] = field(default_factory=lambda: [0, 0])
    castling_rights: int = 0
    rule50: int = 0
    plies_from_null: int = 0
    ep_square: int = SQ_NONE
    key: int = 0
    checkers_bb: int = 0
    previous: StateInfo | None = field(default=None, compare=False, repr=False)
    blockers_for_king: list[int] = field(default_factory=lambda: [0, 0])
    pinners: list[int] = field(default_factory=lambda: [0, 0])
    check_squares: list[int] = field(default_factory=lambda: [0] * PIECE_TYPE_NB)
    captured_piece: Piece = Piece.NO_PIECE
    repetition: int = 0


class Board:
    """Piece placement, side to move, castling and hash data of a chess position."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._board: list[Piece] = [Piece.NO_PIECE] * SQUARE_NB
        self._by_type = [0] * PIECE_TYPE_NB
        self._by_color = [0, 0]
        self._piece_count = [0] * PIECE_NB
        self._castling_rights_mask = [0] * SQUARE_NB
        self._castling_rook_square = [SQ_NONE] * CASTLING_RIGHT_NB
        self._castling_path = [0] * CASTLING_RIGHT_NB
        self.state = StateInfo()
        self._game_ply = 0
        self._side_to_move = Color.WHITE
        self._psq = 0
        self._chess960 = False

    # Construction

    @classmethod
    def from_fen(cls, fen: str = START_FEN, chess960: bool = False) -> Board:
        board = cls()
        board.set_fen(fen, chess960)
        return board

    @classmethod
    def from_endgame_code(cls, code: str, color: Color) -> Board:
        """Set up a position from an endgame code such as 'KBPKN'.

        The side named by color gets the lowercase (black) pieces of the
        weaker half; the position is only meant for its material key.
        """
        if not code or code[0] != "K":
            raise ValueError(f"endgame code must start with 'K': {code!r}")
        second_king = code.find("K", 1)
        if second_king < 0:
            raise ValueError(f"endgame code needs two kings: {code!r}")
        v = code.find("v")
        strong_end = second_king if v < 0 else min(v, second_king)
        sides = [code[second_king:], code[:strong_end]]
        for side in sides:
            if not 0 < len(side) < 8:
                raise ValueError(f"bad endgame code: {code!r}")
        sides[int(color)] = sides[int(color)].lower()
        fen = (
            f"8/{sides[0]}{8 - len(sides[0])}/8/8/8/8/"
            f"{sides[1]}{8 - len(sides[1])}/8 w - - 0 10"
        )
        return cls.from_fen(fen, False)

    def set_fen(self, fen: str, chess960: bool = False) -> None:
        """Replace the whole position by the one the FEN string describes."""
        fields = fen.split()
        if not fields:
            raise ValueError("empty FEN string")
        self._reset()
        st = self.state

        sq = SQ_A8
        for ch in fields[0]:
            if ch in "0123456789":
                sq += int(ch)
            elif ch == "/":
                sq -= 16
            else:
                idx = PIECE_CHARS.find(ch)
                if idx > 0:
                    if not is_ok_square(sq):
                        raise ValueError(f"piece placed off the board in FEN: {fen!r}")
                    self.put_piece(Piece(idx), sq)
                    sq += 1

        for color in Color:
            if self.count(PieceType.KING, color) != 1:
                raise ValueError(f"FEN must have exactly one {color.name.lower()} king: {fen!r}")

        active = fields[1] if len(fields) > 1 else ""
        self._side_to_move = Color.WHITE if active[:1] == "w" else Color.BLACK
        us = self._side_to_move

        for ch in fields[2] if len(fields) > 2 else "":
            c = Color.BLACK if ch.islower() else Color.WHITE
            rook = make_piece(c, PieceType.ROOK)
            up = ch.upper()
            if up == "K":
                start = relative_square(c, SQ_H1)
                candidates = range(start, start - 8, -1)
            elif up == "Q":
                start = relative_square(c, SQ_A1)
                candidates = range(start, start + 8)
            elif "A" <= up <= "H":
                candidates = [make_square(ord(up) - ord("A"), relative_rank(c, RANK_1))]
            else:
                continue
            rsq = next((s for s in candidates if self._board[s] == rook), None)
            if rsq is None:
                raise ValueError(f"no rook for castling right {ch!r} in FEN: {fen!r}")
            self._set_castling_right(c, rsq)

        enpassant = False
        ep = fields[3] if len(fields) > 3 else ""
        if len(ep) >= 2 and "a" <= ep[0] <= "h" and ep[1] == ("6" if us == Color.WHITE else "3"):
            st.ep_square = make_square(ord(ep[0]) - ord("a"), ord(ep[1]) - ord("1"))
            them = ~us
            eps = st.ep_square
            enpassant = bool(
                pawn_attacks(them, eps) & self.pieces_of(us, PieceType.PAWN)
                and self.pieces_of(them, PieceType.PAWN) & (1 << (eps + pawn_push(them)))
                and not self.pieces() & ((1 << eps) | (1 << (eps + pawn_push(us))))
            )
        if not enpassant:
            st.ep_square = SQ_NONE

        full_moves = 0
        rule50 = _leading_int(fields[4]) if len(fields) > 4 else None
        if rule50 is not None:
            st.rule50 = rule50
            moves = _leading_int(fields[5]) if len(fields) > 5 else None
            if moves is not None:
                full_moves = moves
        self._game_ply = max(2 * (full_moves - 1), 0) + (us == Color.BLACK)

        self._chess960 = chess960
        self._set_state(st)

    def _set_castling_right(self, color: Color, rfrom: int) -> None:
        kfrom = self.king_square(color)
        side = CastlingRights.KING_SIDE if kfrom < rfrom else CastlingRights.QUEEN_SIDE
        cr = int(castling_for(color, side))

        self.state.castling_rights |= cr
        self._castling_rights_mask[kfrom] |= cr
        self._castling_rights_mask[rfrom] |= cr
        self._castling_rook_square[cr] = rfrom

        king_side = bool(cr & CastlingRights.KING_SIDE)
        kto = relative_square(color, SQ_G1 if king_side else SQ_C1)
        rto = relative_square(color, SQ_F1 if king_side else SQ_D1)
        self._castling_path[cr] = (between(rfrom, rto) | between(kfrom, kto)) & ~(
            (1 << kfrom) | (1 << rfrom)
        )

    def _set_check_info(self, si: StateInfo) -> None:
        w_block, b_pinners = self.slider_blockers(
            self.pieces_of(Color.BLACK), self.king_square(Color.WHITE)
        )
        b_block, w_pinners = self.slider_blockers(
            self.pieces_of(Color.WHITE), self.king_square(Color.BLACK)
        )
        si.blockers_for_king = [w_block, b_block]
        si.pinners = [w_pinners, b_pinners]

        them = ~self._side_to_move
        ksq = self.king_square(them)
        occ = self.pieces()
        checks = [0] * PIECE_TYPE_NB
        checks[PieceType.PAWN] = pawn_attacks(them, ksq)
        checks[PieceType.KNIGHT] = knight_attacks(ksq)
        checks[PieceType.BISHOP] = bishop_attacks(ksq, occ)
        checks[PieceType.ROOK] = rook_attacks(ksq, occ)
        checks[PieceType.QUEEN] = checks[PieceType.BISHOP] | checks[PieceType.ROOK]
        si.check_squares = checks

    def _set_state(self, si: StateInfo) -> None:
        si.key = 0
        si.material_key = 0
        si.pawn_key = ZOBRIST.no_pawns
        si.non_pawn_material = [0, 0]
        us = self._side_to_move
        si.checkers_bb = self.attackers_to(self.king_square(us)) & self.pieces_of(~us)

        self._set_check_info(si)

        for s in iter_squares(self.pieces()):
            pc = self._board[s]
            si.key ^= ZOBRIST.psq[pc][s]
            kind = type_of(pc)
            if kind == PieceType.PAWN:
                si.pawn_key ^= ZOBRIST.psq[pc][s]
            elif kind != PieceType.KING:
                si.non_pawn_material[color_of(pc)] += piece_value(MG, pc)

        if si.ep_square != SQ_NONE:
            si.key ^= ZOBRIST.enpassant[file_of(si.ep_square)]
        if us == Color.BLACK:
            si.key ^= ZOBRIST.side
        si.key ^= ZOBRIST.castling[si.castling_rights]

        for pc in PIECES:
            for cnt in range(self._piece_count[pc]):
                si.material_key ^= ZOBRIST.psq[pc][cnt]

    # FEN output

    def fen(self) -> str:
        """FEN of the position; Shredder-FEN castling letters in Chess960."""
        rows = []
        for r in range(7, -1, -1):
            row = ""
            empty = 0
            for f in range(8):
                pc = self._board[make_square(f, r)]
                if pc == Piece.NO_PIECE:
                    empty += 1
                    continue
                if empty:
                    row += str(empty)
                    empty = 0
                row += PIECE_CHARS[pc]
            if empty:
                row += str(empty)
            rows.append(row)

        castling = ""
        for cr, letter, base in (
            (CastlingRights.WHITE_OO, "K", "A"),
            (CastlingRights.WHITE_OOO, "Q", "A"),
            (CastlingRights.BLACK_OO, "k", "a"),
            (CastlingRights.BLACK_OOO, "q", "a"),
        ):
            if self.can_castle(cr):
                if self._chess960:
                    castling += chr(ord(base) + file_of(self.castling_rook_square(cr)))
                else:
                    castling += letter
        if not castling:
            castling = "-"

        ep = "-" if self.state.ep_square == SQ_NONE else square_name(self.state.ep_square)
        black = self._side_to_move == Color.BLACK
        full = 1 + (self._game_ply - black) // 2
        side = "b" if black else "w"
        return f"{'/'.join(rows)} {side} {castling} {ep} {self.state.rule50} {full}"

    # Position representation

    def pieces(self, *args: PieceType) -> int:
        """Bitboard of all pieces, or of the given piece types of both colours."""
        if not args:
            return self._by_type[PieceType.ALL_PIECES]
        bb = 0
        for pt in args:
            bb |= self._by_type[pt]
        return bb

    def pieces_of(self, color: Color, *args: PieceType) -> int:
        """Bitboard of one colour's pieces, optionally of the given types only."""
        if not args:
            return self._by_color[color]
        return self._by_color[color] & self.pieces(*args)

    def piece_on(self, square: int) -> Piece:
        if not is_ok_square(square):
            raise ValueError(f"invalid square: {square}")
        return self._board[square]

    def is_empty(self, square: int) -> bool:
        return self.piece_on(square) == Piece.NO_PIECE

    def count(self, piece_type: PieceType, color: Color | None = None) -> int:
        """Number of pieces of a type, for one colour or both."""
        if color is None:
            return sum(self._piece_count[(c << 3) + int(piece_type)] for c in Color)
        return self._piece_count[(int(color) << 3) + int(piece_type)]

    def king_square(self, color: Color) -> int:
        if self.count(PieceType.KING, color) != 1:
            raise ValueError(f"{color.name.lower()} does not have exactly one king")
        return lsb(self.pieces_of(color, PieceType.KING))

    def is_on_semiopen_file(self, color: Color, square: int) -> bool:
        return not self.pieces_of(color, PieceType.PAWN) & file_bb(square)

    # Castling

    def castling_rights(self, color: Color) -> CastlingRights:
        return castling_for(color, self.state.castling_rights)

    def can_castle(self, rights: int) -> bool:
        return bool(self.state.castling_rights & rights)

    @staticmethod
    def _check_single_right(rights: int) -> None:
        if rights not in _SINGLE_RIGHTS:
            raise ValueError(f"expected a single castling right, got {rights!r}")

    def castling_impeded(self, rights: int) -> bool:
        self._check_single_right(rights)
        return bool(self.pieces() & self._castling_path[rights])

    def castling_rook_square(self, rights: int) -> int:
        self._check_single_right(rights)
        return self._castling_rook_square[rights]

    # Checking

    def checkers(self) -> int:
        return self.state.checkers_bb

    def blockers_for_king(self, color: Color) -> int:
        return self.state.blockers_for_king[color]

    def pinners(self, color: Color) -> int:
        return self.state.pinners[color]

    def check_squares(self, piece_type: PieceType) -> int:
        return self.state.check_squares[piece_type]

    # Attacks

    def attackers_to(self, square: int, occupied: int | None = None) -> int:
        """Pieces of both colours attacking a square, sliders seen through occupied."""
        occ = self.pieces() if occupied is None else occupied
        return (
            (pawn_attacks(Color.BLACK, square) & self.pieces_of(Color.WHITE, PieceType.PAWN))
            | (pawn_attacks(Color.WHITE, square) & self.pieces_of(Color.BLACK, PieceType.PAWN))
            | (knight_attacks(square) & self.pieces(PieceType.KNIGHT))
            | (rook_attacks(square, occ) & self.pieces(PieceType.ROOK, PieceType.QUEEN))
            | (bishop_attacks(square, occ) & self.pieces(PieceType.BISHOP, PieceType.QUEEN))
            | (king_attacks(square) & self.pieces(PieceType.KING))
        )

    def slider_blockers(self, sliders: int, square: int) -> tuple[int, int]:
        """Pieces blocking slider attacks on an occupied square, and the sliders pinning them.

        Returns (blockers, pinners); a pinner is a slider whose only blocker
        has the colour of the piece on square.
        """
        snipers = (
            (rook_attacks(square) & self.pieces(PieceType.QUEEN, PieceType.ROOK))
            | (bishop_attacks(square) & self.pieces(PieceType.QUEEN, PieceType.BISHOP))
        ) & sliders
        occupancy = self.pieces() ^ snipers
        blockers = pinners = 0
        for sniper in iter_squares(snipers):
            b = between(square, sniper) & occupancy
            if b and not more_than_one(b):
                blockers |= b
                if b & self.pieces_of(color_of(self._board[square])):
                    pinners |= 1 << sniper
        return blockers, pinners

    def attacks_by(self, piece_type: PieceType, color: Color) -> int:
        """All squares attacked by one colour's pieces of a type."""
        threats = 0
        occ = self.pieces()
        for s in iter_squares(self.pieces_of(color, piece_type)):
            if piece_type == PieceType.PAWN:
                threats |= pawn_attacks(color, s)
            elif piece_type == PieceType.BISHOP:
                threats |= bishop_attacks(s, occ)
            elif piece_type == PieceType.ROOK:
                threats |= rook_attacks(s, occ)
            elif piece_type == PieceType.QUEEN:
                threats |= bishop_attacks(s, occ) | rook_attacks(s, occ)
            elif piece_type == PieceType.KNIGHT:
                threats |= knight_attacks(s)
            else:
                threats |= king_attacks(s)
        return threats

    # Moves

    def capture(self, move: int) -> bool:
        """True for captures; castling, encoded as king takes rook, is not one."""
        kind = move_type(move)
        return (not self.is_empty(to_sq(move)) and kind != MoveType.CASTLING) or (
            kind == MoveType.EN_PASSANT
        )

    def moved_piece(self, move: int) -> Piece:
        return self.piece_on(from_sq(move))

    def captured_piece(self) -> Piece:
        return self.state.captured_piece

    # Piece specific

    def opposite_bishops(self) -> bool:
        if self.count(PieceType.BISHOP, Color.WHITE) != 1 or self.count(PieceType.BISHOP, Color.BLACK) != 1:
            return False
        return _opposite_colors(
            lsb(self.pieces_of(Color.WHITE, PieceType.BISHOP)),
            lsb(self.pieces_of(Color.BLACK, PieceType.BISHOP)),
        )

    def pawns_on_same_color_squares(self, color: Color, square: int) -> int:
        mask = DARK_SQUARES if DARK_SQUARES & (1 << square) else ~DARK_SQUARES
        return popcount(self.pieces_of(color, PieceType.PAWN) & mask)

    # Keys and scores

    def _adjust_key50(self, key: int, after_move: bool) -> int:
        limit = 14 - int(after_move)
        rule50 = self.state.rule50
        return key if rule50 < limit else key ^ make_key((rule50 - limit) // 8)

    def key(self) -> int:
        """Position hash, varied once the fifty-move counter grows large."""
        return self._adjust_key50(self.state.key, False)

    def pawn_key(self) -> int:
        return self.state.pawn_key

    def material_key(self) -> int:
        return self.state.material_key

    def psq_score(self) -> int:
        """Packed piece-square score, positive for White."""
        return make_score(mg_value(self._psq), eg_value(self._psq))

    def psq_eg_stm(self) -> int:
        sign = 1 if self._side_to_move == Color.WHITE else -1
        return sign * eg_value(self._psq)

    def non_pawn_material(self, color: Color | None = None) -> int:
        if color is None:
            return sum(self.state.non_pawn_material)
        return self.state.non_pawn_material[color]

    def rule50_count(self) -> int:
        return self.state.rule50

    def game_ply(self) -> int:
        return self._game_ply

    def side_to_move(self) -> Color:
        return self._side_to_move

    def is_chess960(self) -> bool:
        return self._chess960

    def ep_square(self) -> int:
        return self.state.ep_square

    # Board updates

    def put_piece(self, piece: Piece, square: int) -> None:
        if piece == Piece.NO_PIECE:
            raise ValueError("cannot place an empty piece")
        bit = 1 << square
        self._board[square] = Piece(piece)
        self._by_type[PieceType.ALL_PIECES] |= bit
        self._by_type[type_of(piece)] |= bit
        self._by_color[color_of(piece)] |= bit
        self._piece_count[piece] += 1
        self._piece_count[int(color_of(piece)) << 3] += 1
        self._psq += psq(piece, square)

    def remove_piece(self, square: int) -> None:
        pc = self._board[square]
        if pc == Piece.NO_PIECE:
            raise ValueError(f"no piece on {square_name(square)}")
        bit = 1 << square
        self._by_type[PieceType.ALL_PIECES] ^= bit
        self._by_type[type_of(pc)] ^= bit
        self._by_color[color_of(pc)] ^= bit
        self._board[square] = Piece.NO_PIECE
        self._piece_count[pc] -= 1
        self._piece_count[int(color_of(pc)) << 3] -= 1
        self._psq -= psq(pc, square)

    def move_piece(self, origin: int, target: int) -> None:
        pc = self._board[origin]
        if pc == Piece.NO_PIECE:
            raise ValueError(f"no piece on {square_name(origin)}")
        from_to = (1 << origin) | (1 << target)
        self._by_type[PieceType.ALL_PIECES] ^= from_to
        self._by_type[type_of(pc)] ^= from_to
        self._by_color[color_of(pc)] ^= from_to
        self._board[origin] = Piece.NO_PIECE
        self._board[target] = pc
        self._psq += psq(pc, target) - psq(pc, origin)

    # Debugging helpers

    def flip(self) -> None:
        """Mirror the position, swapping the white and black sides."""
        placement, active, castling, ep, rule50, full = self.fen().split(" ")
        flipped = "/".join(reversed(placement.split("/")))
        head = f"{flipped} {'B' if active == 'w' else 'W'} {castling} ".swapcase()
        if ep != "-":
            ep = ep[0] + ("6" if ep[1] == "3" else "3")
        self.set_fen(f"{head}{ep} {rule50} {full}", self._chess960)

    def is_consistent(self) -> bool:
        """Check the internal data of the position for contradictions."""
        us = self._side_to_move
        for color in Color:
            if self.count(PieceType.KING, color) != 1:
                return False
        ep = self.state.ep_square
        if ep != SQ_NONE and relative_rank(us, rank_of(ep)) != RANK_6:
            return False
        if self.attackers_to(self.king_square(~us)) & self.pieces_of(us):
            return False
        pawns = self.pieces(PieceType.PAWN)
        rank_ends = 0xFF | (0xFF << 56)
        if pawns & rank_ends:
            return False
        if self._piece_count[Piece.W_PAWN] > 8 or self._piece_count[Piece.B_PAWN] > 8:
            return False
        white, black = self._by_color
        if white & black or (white | black) != self.pieces():
            return False
        if popcount(white) > 16 or popcount(black) > 16:
            return False
        kinds = list(PieceType)[1:]
        for p1 in kinds:
            for p2 in kinds:
                if p1 != p2 and self.pieces(p1) & self.pieces(p2):
                    return False
        recomputed = replace(self.state)
        self._set_state(recomputed)
        if recomputed != self.state:
            return False
        for pc in PIECES:
            n = self._piece_count[pc]
            if n != popcount(self.pieces_of(color_of(pc), type_of(pc))) or n != self._board.count(pc):
                return False
        for color in Color:
            for side in (CastlingRights.KING_SIDE, CastlingRights.QUEEN_SIDE):
                cr = int(castling_for(color, side))
                if not self.can_castle(cr):
                    continue
                rsq = self._castling_rook_square[cr]
                if (
                    self._board[rsq] != make_piece(color, PieceType.ROOK)
                    or self._castling_rights_mask[rsq] != cr
                    or (self._castling_rights_mask[self.king_square(color)] & cr) != cr
                ):
                    return False
        return True

    def __str__(self) -> str:
        out = "\n" + _BORDER
        for r in range(7, -1, -1):
            for f in range(FILE_A, FILE_H + 1):
                out += " | " + PIECE_CHARS[self._board[make_square(f, r)]]
            out += f" | {r + 1}\n" + _BORDER
        out += "   a   b   c   d   e   f   g   h\n"
        out += f"\nFen: {self.fen()}\nKey: {self.key():016X}\nCheckers: "
        out += "".join(square_name(s) + " " for s in iter_squares(self.checkers()))
        return out