"""Making and unmaking moves, legality and check tests, exchange evaluation and repetition detection."""

from __future__ import annotations

from dataclasses import replace

from .attacks import (
    aligned,
    attacks,
    between,
    bishop_attacks,
    pawn_attacks,
    rook_attacks,
)
from .board import ZOBRIST, Board, StateInfo
from .types import (
    BISHOP_VALUE_MG,
    EAST,
    KNIGHT_VALUE_MG,
    MG,
    PAWN_VALUE_MG,
    QUEEN_VALUE_MG,
    ROOK_VALUE_MG,
    SQ_C1,
    SQ_D1,
    SQ_F1,
    SQ_G1,
    SQ_NONE,
    VALUE_ZERO,
    WEST,
    Color,
    MoveType,
    Piece,
    PieceType,
    color_of,
    file_of,
    from_sq,
    is_ok_move,
    make_piece,
    make_square,
    move_type,
    pawn_push,
    piece_value,
    promotion_type,
    rank_of,
    relative_square,
    to_sq,
    type_of,
)
from .zobrist import build_cuckoo

CUCKOO = build_cuckoo(ZOBRIST)


def _lowest(bb: int) -> int:
    return bb & -bb


class Position(Board):
    """A board that can make and take back moves and answer questions about them."""

    def __init__(self) -> None:
        super().__init__()
        self.nodes = 0

    # Validation helpers

    def _require_own_move(self, move: int) -> None:
        if not is_ok_move(move):
            raise ValueError(f"not a real move: {move}")
        pc = self.piece_on(from_sq(move))
        if pc == Piece.NO_PIECE or color_of(pc) != self._side_to_move:
            raise ValueError("the move does not start from a piece of the side to move")

    # Properties of moves

    def legal(self, move: int) -> bool:
        """Whether a pseudo-legal move leaves the mover's king safe."""
        self._require_own_move(move)
        us = self._side_to_move
        them = ~us
        origin, target = from_sq(move), to_sq(move)
        ksq = self.king_square(us)
        kind = move_type(move)

        if kind == MoveType.EN_PASSANT:
            capsq = target - pawn_push(us)
            occupied = (self.pieces() ^ (1 << origin) ^ (1 << capsq)) | (1 << target)
            return not (
                rook_attacks(ksq, occupied) & self.pieces_of(them, PieceType.QUEEN, PieceType.ROOK)
            ) and not (
                bishop_attacks(ksq, occupied) & self.pieces_of(them, PieceType.QUEEN, PieceType.BISHOP)
            )

        if kind == MoveType.CASTLING:
            king_side = target > origin
            kto = relative_square(us, SQ_G1 if king_side else SQ_C1)
            step = WEST if king_side else EAST
            s = kto
            while s != origin:
                if self.attackers_to(s) & self.pieces_of(them):
                    return False
                s += step
            return not self._chess960 or not (self.blockers_for_king(us) & (1 << target))

        if type_of(self._board[origin]) == PieceType.KING:
            return not (self.attackers_to(target, self.pieces() ^ (1 << origin)) & self.pieces_of(them))

        return not (self.blockers_for_king(us) & (1 << origin)) or aligned(origin, target, ksq)

    def gives_check(self, move: int) -> bool:
        """Whether a pseudo-legal move checks the opponent's king."""
        self._require_own_move(move)
        us = self._side_to_move
        origin, target = from_sq(move), to_sq(move)
        ksq = self.king_square(~us)

        if self.check_squares(type_of(self._board[origin])) & (1 << target):
            return True

        if self.blockers_for_king(~us) & (1 << origin) and not aligned(origin, target, ksq):
            return True

        kind = move_type(move)
        if kind == MoveType.NORMAL:
            return False
        if kind == MoveType.PROMOTION:
            occ = self.pieces() ^ (1 << origin)
            return bool(attacks(promotion_type(move), target, occ) & (1 << ksq))
        if kind == MoveType.EN_PASSANT:
            capsq = make_square(file_of(target), rank_of(origin))
            b = (self.pieces() ^ (1 << origin) ^ (1 << capsq)) | (1 << target)
            return bool(
                (rook_attacks(ksq, b) & self.pieces_of(us, PieceType.QUEEN, PieceType.ROOK))
                | (bishop_attacks(ksq, b) & self.pieces_of(us, PieceType.QUEEN, PieceType.BISHOP))
            )
        rto = relative_square(us, SQ_F1 if target > origin else SQ_D1)
        return bool(
            rook_attacks(rto) & (1 << ksq)
            and rook_attacks(rto, self.pieces() ^ (1 << origin) ^ (1 << target)) & (1 << ksq)
        )

    # Doing and undoing moves

    def _do_castling(self, do: bool, us: Color, origin: int, target: int) -> tuple[int, int, int]:
        """Move king and rook for castling (or back); returns king target, rook from, rook to."""
        king_side = target > origin
        rfrom = target
        rto = relative_square(us, SQ_F1 if king_side else SQ_D1)
        kto = relative_square(us, SQ_G1 if king_side else SQ_C1)
        # Both pieces leave first since squares can overlap in Chess960.
        self.remove_piece(origin if do else kto)
        self.remove_piece(rfrom if do else rto)
        self.put_piece(make_piece(us, PieceType.KING), kto if do else origin)
        self.put_piece(make_piece(us, PieceType.ROOK), rto if do else rfrom)
        return kto, rfrom, rto

    def do_move(self, move: int, gives_check: bool | None = None) -> None:
        """Make a legal move; gives_check is computed when not supplied."""
        self._require_own_move(move)
        if gives_check is None:
            gives_check = self.gives_check(move)

        self.nodes += 1
        prev = self.state
        k = prev.key ^ ZOBRIST.side
        st = StateInfo(
            pawn_key=prev.pawn_key,
            material_key=prev.material_key,
            non_pawn_material=list(prev.non_pawn_material),
            castling_rights=prev.castling_rights,
            rule50=prev.rule50,
            plies_from_null=prev.plies_from_null,
            ep_square=prev.ep_square,
            previous=prev,
        )
        self.state = st

        self._game_ply += 1
        st.rule50 += 1
        st.plies_from_null += 1

        us = self._side_to_move
        them = ~us
        origin, target = from_sq(move), to_sq(move)
        kind = move_type(move)
        pc = self._board[origin]
        captured = make_piece(them, PieceType.PAWN) if kind == MoveType.EN_PASSANT else self._board[target]

        if kind == MoveType.CASTLING:
            target, rfrom, rto = self._do_castling(True, us, origin, target)
            k ^= ZOBRIST.psq[captured][rfrom] ^ ZOBRIST.psq[captured][rto]
            captured = Piece.NO_PIECE

        if captured != Piece.NO_PIECE:
            capsq = target
            if type_of(captured) == PieceType.PAWN:
                if kind == MoveType.EN_PASSANT:
                    capsq -= pawn_push(us)
                st.pawn_key ^= ZOBRIST.psq[captured][capsq]
            else:
                st.non_pawn_material[them] -= piece_value(MG, captured)

            self.remove_piece(capsq)
            k ^= ZOBRIST.psq[captured][capsq]
            st.material_key ^= ZOBRIST.psq[captured][self._piece_count[captured]]
            st.rule50 = 0

        k ^= ZOBRIST.psq[pc][origin] ^ ZOBRIST.psq[pc][target]

        if st.ep_square != SQ_NONE:
            k ^= ZOBRIST.enpassant[file_of(st.ep_square)]
            st.ep_square = SQ_NONE

        mask = self._castling_rights_mask[origin] | self._castling_rights_mask[target]
        if st.castling_rights and mask:
            k ^= ZOBRIST.castling[st.castling_rights]
            st.castling_rights &= ~mask
            k ^= ZOBRIST.castling[st.castling_rights]

        if kind != MoveType.CASTLING:
            self.move_piece(origin, target)

        if type_of(pc) == PieceType.PAWN:
            if (target ^ origin) == 16 and (
                pawn_attacks(us, target - pawn_push(us)) & self.pieces_of(them, PieceType.PAWN)
            ):
                st.ep_square = target - pawn_push(us)
                k ^= ZOBRIST.enpassant[file_of(st.ep_square)]
            elif kind == MoveType.PROMOTION:
                promotion = make_piece(us, promotion_type(move))
                self.remove_piece(target)
                self.put_piece(promotion, target)
                k ^= ZOBRIST.psq[pc][target] ^ ZOBRIST.psq[promotion][target]
                st.pawn_key ^= ZOBRIST.psq[pc][target]
                st.material_key ^= (
                    ZOBRIST.psq[promotion][self._piece_count[promotion] - 1]
                    ^ ZOBRIST.psq[pc][self._piece_count[pc]]
                )
                st.non_pawn_material[us] += piece_value(MG, promotion)

            st.pawn_key ^= ZOBRIST.psq[pc][origin] ^ ZOBRIST.psq[pc][target]
            st.rule50 = 0

        st.captured_piece = captured
        st.key = k
        st.checkers_bb = (
            self.attackers_to(self.king_square(them)) & self.pieces_of(us) if gives_check else 0
        )

        self._side_to_move = them
        self._set_check_info(st)

        st.repetition = 0
        end = min(st.rule50, st.plies_from_null)
        if end >= 4:
            stp = st.previous.previous
            for i in range(4, end + 1, 2):
                stp = stp.previous.previous
                if stp.key == st.key:
                    st.repetition = -i if stp.repetition else i
                    break

    def undo_move(self, move: int) -> None:
        """Take back the last move made, which must be the given one."""
        st = self.state
        if st.previous is None:
            raise ValueError("no move to undo")
        if not is_ok_move(move):
            raise ValueError(f"not a real move: {move}")

        self._side_to_move = ~self._side_to_move
        us = self._side_to_move
        origin, target = from_sq(move), to_sq(move)
        kind = move_type(move)

        if kind == MoveType.PROMOTION:
            self.remove_piece(target)
            self.put_piece(make_piece(us, PieceType.PAWN), target)

        if kind == MoveType.CASTLING:
            self._do_castling(False, us, origin, target)
        else:
            self.move_piece(target, origin)
            if st.captured_piece != Piece.NO_PIECE:
                capsq = target
                if kind == MoveType.EN_PASSANT:
                    capsq -= pawn_push(us)
                self.put_piece(st.captured_piece, capsq)

        self.state = st.previous
        self._game_ply -= 1

    def do_null_move(self) -> None:
        """Pass the turn without moving; not allowed while in check."""
        if self.checkers():
            raise ValueError("cannot make a null move while in check")
        prev = self.state
        st = replace(
            prev,
            non_pawn_material=list(prev.non_pawn_material),
            blockers_for_king=list(prev.blockers_for_king),
            pinners=list(prev.pinners),
            check_squares=list(prev.check_squares),
            previous=prev,
        )
        self.state = st

        if st.ep_square != SQ_NONE:
            st.key ^= ZOBRIST.enpassant[file_of(st.ep_square)]
            st.ep_square = SQ_NONE

        st.key ^= ZOBRIST.side
        st.rule50 += 1
        st.plies_from_null = 0

        self._side_to_move = ~self._side_to_move
        self._set_check_info(st)
        st.repetition = 0

    def undo_null_move(self) -> None:
        """Take back a null move."""
        if self.checkers():
            raise ValueError("the last move was not a null move")
        if self.state.previous is None:
            raise ValueError("no move to undo")
        self.state = self.state.previous
        self._side_to_move = ~self._side_to_move

    # Keys

    def key_after(self, move: int) -> int:
        """Hash key after a plain move; castling, en passant and promotion are not recognised."""
        origin, target = from_sq(move), to_sq(move)
        pc = self._board[origin]
        captured = self._board[target]
        k = self.state.key ^ ZOBRIST.side
        if captured != Piece.NO_PIECE:
            k ^= ZOBRIST.psq[captured][target]
        k ^= ZOBRIST.psq[pc][target] ^ ZOBRIST.psq[pc][origin]
        if captured != Piece.NO_PIECE or type_of(pc) == PieceType.PAWN:
            return k
        return self._adjust_key50(k, True)

    # Static exchange evaluation

    def see_ge(self, move: int, threshold: int = VALUE_ZERO) -> bool:
        """Whether the exchange started by the move gains at least threshold."""
        if not is_ok_move(move):
            raise ValueError(f"not a real move: {move}")
        if move_type(move) != MoveType.NORMAL:
            return VALUE_ZERO >= threshold

        origin, target = from_sq(move), to_sq(move)
        swap = piece_value(MG, self._board[target]) - threshold
        if swap < 0:
            return False
        swap = piece_value(MG, self._board[origin]) - swap
        if swap <= 0:
            return True

        occupied = self.pieces() ^ (1 << origin) ^ (1 << target)
        stm = self._side_to_move
        attackers = self.attackers_to(target, occupied)
        res = 1
        diagonal = self.pieces(PieceType.BISHOP, PieceType.QUEEN)
        straight = self.pieces(PieceType.ROOK, PieceType.QUEEN)

        while True:
            stm = ~stm
            attackers &= occupied
            stm_attackers = attackers & self.pieces_of(stm)
            if not stm_attackers:
                break

            if self.pinners(~stm) & occupied:
                stm_attackers &= ~self.blockers_for_king(stm)
                if not stm_attackers:
                    break

            res ^= 1

            bb = stm_attackers & self.pieces(PieceType.PAWN)
            if bb:
                swap = PAWN_VALUE_MG - swap
                if swap < res:
                    break
                occupied ^= _lowest(bb)
                attackers |= bishop_attacks(target, occupied) & diagonal
                continue

            bb = stm_attackers & self.pieces(PieceType.KNIGHT)
            if bb:
                swap = KNIGHT_VALUE_MG - swap
                if swap < res:
                    break
                occupied ^= _lowest(bb)
                continue

            bb = stm_attackers & self.pieces(PieceType.BISHOP)
            if bb:
                swap = BISHOP_VALUE_MG - swap
                if swap < res:
                    break
                occupied ^= _lowest(bb)
                attackers |= bishop_attacks(target, occupied) & diagonal
                continue

            bb = stm_attackers & self.pieces(PieceType.ROOK)
            if bb:
                swap = ROOK_VALUE_MG - swap
                if swap < res:
                    break
                occupied ^= _lowest(bb)
                attackers |= rook_attacks(target, occupied) & straight
                continue

            bb = stm_attackers & self.pieces(PieceType.QUEEN)
            if bb:
                swap = QUEEN_VALUE_MG - swap
                if swap < res:
                    break
                occupied ^= _lowest(bb)
                attackers |= (bishop_attacks(target, occupied) & diagonal) | (
                    rook_attacks(target, occupied) & straight
                )
                continue

            # A king "capture" fails if the opponent still has attackers.
            return bool(res ^ 1 if attackers & ~self.pieces_of(stm) else res)

        return bool(res)

    # Repetitions

    def has_repeated(self) -> bool:
        """Whether a position has repeated since the last capture or pawn move."""
        stc = self.state
        end = min(stc.rule50, stc.plies_from_null)
        while end >= 4:
            end -= 1
            if stc.repetition:
                return True
            stc = stc.previous
        return False

    def has_game_cycle(self, ply: int) -> bool:
        """Whether a reversible move reaches an earlier position, drawing by repetition."""
        st = self.state
        end = min(st.rule50, st.plies_from_null)
        if end < 3:
            return False

        original = st.key
        stp = st.previous
        for i in range(3, end + 1, 2):
            stp = stp.previous.previous
            move = CUCKOO.lookup(original ^ stp.key)
            if move is None:
                continue
            s1, s2 = from_sq(move), to_sq(move)
            if (between(s1, s2) ^ (1 << s2)) & self.pieces():
                continue
            if ply > i:
                return True
            sq = s2 if self.is_empty(s1) else s1
            if color_of(self._board[sq]) != self._side_to_move:
                continue
            if stp.repetition:
                return True
        return False