# chesscore

A chess position library: bitboards, FEN input and output (including
Chess960 / Shredder-FEN castling letters), Zobrist hashing, incremental
move making and unmaking, legality and check tests for given moves,
static exchange evaluation and repetition detection.

## Installation

```
pip install .
```

## Usage

```python
from chesscore.position import Position
from chesscore.types import make_move
from chesscore.attacks import parse_square

pos = Position.from_fen(
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", False
)
print(pos)             # ASCII board, FEN, hash key and checkers

move = make_move(parse_square("e2"), parse_square("e4"))
if pos.legal(move):
    pos.do_move(move, pos.gives_check(move))
    print(pos.fen())   # rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1
    pos.undo_move(move)
```

`Position.do_move` computes whether the move gives check when its second
argument is left out. Each move made keeps a link to the previous
`StateInfo`, so `undo_move` and `undo_null_move` restore it exactly.

### Modules

- `chesscore.types` – `Color`, `PieceType`, `Piece`, `MoveType`,
  `CastlingRights`, `Bound`; square, move and score helpers such as
  `make_square`, `make_move`, `make`, `make_score`, `mg_value`,
  `eg_value`, `piece_value` and the value constants.
- `chesscore.psqt` – piece-square tables with packed middlegame and
  endgame scores (`psq`, `build_table`).
- `chesscore.attacks` – bitboard helpers (`popcount`, `lsb`,
  `iter_squares`, `between`, `aligned`, …), attack sets for every piece
  type, and `square_name` / `parse_square`.
- `chesscore.zobrist` – deterministic Zobrist keys (`build_keys`,
  `ZobristKeys`) and the cuckoo table of reversible moves
  (`build_cuckoo`, `CuckooTable`).
- `chesscore.board` – `Board` and `StateInfo`: piece placement, FEN
  parsing and formatting, endgame-code setup (`Board.from_endgame_code`),
  castling rights, checkers, pins, hash keys, `flip` and
  `is_consistent`.
- `chesscore.position` – `Position`, a `Board` with `legal`,
  `gives_check`, `do_move`, `undo_move`, `do_null_move`,
  `undo_null_move`, `key_after`, `see_ge`, `has_repeated` and
  `has_game_cycle`.
- `chesscore.search` – `RootMove` and `LimitsType`, records a search
  driver keeps for root moves and time limits.

A move is an integer: bits 0–5 hold the destination square, bits 6–11
the origin square, bits 12–13 the promotion piece, and bits 14–15 the
move kind (normal, promotion, en passant, castling). Castling is encoded
as the king capturing its own rook.

Invalid input raises `ValueError`: a FEN without exactly one king per
side, a castling letter with no matching rook, a move that does not
start from a piece of the side to move, or a null move while in check.

## What it does not do

The package has no move generator: `legal` and `gives_check` test moves
you supply, they do not list them. There is no search, no evaluation
function, no endgame tablebase probing, and no command-line program or
engine protocol; `RootMove` and `LimitsType` are plain records for a
search to use.

## Tests

```
pip install .[test]
pytest
```