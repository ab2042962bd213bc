"""Root move records and search limits."""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import VALUE_INFINITE


class RootMove:
    """A move at the root of the search, with its score and principal variation."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, move: int) -> None:
        self.pv: list[int] = [move]
        self.score = -VALUE_INFINITE
        self.previous_score = -VALUE_INFINITE
        self.average_score = -VALUE_INFINITE
        self.uci_score = -VALUE_INFINITE
        self.score_lowerbound = False
        self.score_upperbound = False
        self.sel_depth = 0
        self.tb_rank = 0
        self.tb_score = 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RootMove):
            return self.pv[0] == other.pv[0]
        if isinstance(other, int):
            return self.pv[0] == other
        return NotImplemented

    def __lt__(self, other: RootMove) -> bool:
        """Orders better moves first: higher score, then higher previous score."""
        if other.score != self.score:
            return other.score < self.score
        return other.previous_score < self.previous_score

    def __repr__(self) -> str:
        return f"RootMove(pv={self.pv!r}, score={self.score})"


@dataclass
class LimitsType:
    """Time, depth and node limits given for a search."""

    searchmoves: list[int] = field(default_factory=list)
    time: list[int] = field(default_factory=lambda: [0, 0])
    inc: list[int] = field(default_factory=lambda: [0, 0])
    npmsec: int = 0
    movetime: int = 0
    start_time: int = 0
    movestogo: int = 0
    depth: int = 0
    mate: int = 0
    perft: int = 0
    infinite: int = 0
    nodes: int = 0

    def use_time_management(self) -> bool:
        """Whether either side has a clock time to manage."""
        return bool(self.time[0] or self.time[1])