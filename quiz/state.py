from dataclasses import dataclass, field
from typing import Optional

from .types import CellState, ScoringPolicy


@dataclass(frozen=True)
class CheckResult:
    index: int
    correct: bool
    correct_value: int
    just_solved: bool
    scored: bool
    score: int

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "correct": self.correct,
            "correct_value": self.correct_value,
            "just_solved": self.just_solved,
            "scored": self.scored,
            "score": self.score,
        }


@dataclass(frozen=True)
class QuizSnapshot:
    """Point-in-time copy of an engine; holds only immutable containers."""

    table: int
    rows: int
    cols: int
    total: int
    values: tuple[int, ...]
    blank_indexes: frozenset[int]
    cell_states: tuple[CellState, ...]
    score: int
    blanks_count: int
    round_completed: bool
    scoring_policy: ScoringPolicy
    fixed_blanks_count: Optional[int] = None
    round_complete: bool = field(init=False)

    def __post_init__(self) -> None:
        complete = all(self.cell_states[index] == CellState.CORRECT for index in self.blank_indexes)
        object.__setattr__(self, "round_complete", complete)

    def to_dict(self) -> dict[str, object]:
        return {
            "table": self.table,
            "rows": self.rows,
            "cols": self.cols,
            "total": self.total,
            "values": list(self.values),
            "blank_indexes": sorted(self.blank_indexes),
            "cell_states": [state.value for state in self.cell_states],
            "score": self.score,
            "blanks_count": self.blanks_count,
            "round_completed": self.round_completed,
            "round_complete": self.round_complete,
            "scoring_policy": self.scoring_policy.value,
            "fixed_blanks_count": self.fixed_blanks_count,
        }
