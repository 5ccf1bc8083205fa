import random
from typing import Optional, Union

from rules.rules import DEFAULT_COLS, DEFAULT_ROWS, DEFAULT_TABLE

from .difficulty import blanks_for_score, pick_blank_indexes
from .state import CheckResult, QuizSnapshot
from .types import AnswerInput, AnswerStates, BlankSet, CellState, CellValues, ScoringPolicy, TraceLog
from .utils import table_values, trace
from .validation import (
    check_index,
    clamp_blanks_count,
    coerce_table,
    parse_number,
    resolve_scoring_policy,
    validate_grid_size,
)


class QuizRound:
    """State of a times-table quiz: grid values, blanks, answers and score.

    The engine is not thread-safe; hosts that share one instance between
    threads must serialize calls themselves.

    Scoring policies:
    - per_round (default): one point when complete_round() is called for a
      round that has not scored yet.
    - per_cell: one point the first time each cell is solved in a round.

    With blanks_count=None the number of blanks grows with the score
    (see blanks_for_score); an integer pins it, clamped to the grid size.
    """

    def __init__(
        self,
        table: object = DEFAULT_TABLE,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        blanks_count: Optional[object] = None,
        scoring_policy: Union[str, ScoringPolicy] = ScoringPolicy.PER_ROUND,
        rng: Optional[random.Random] = None,
        trace: bool = False,
        trace_log: Optional[TraceLog] = None,
    ) -> None:
        validate_grid_size(rows, cols)
        self.rows = rows
        self.cols = cols
        self.total = rows * cols
        self.scoring_policy = resolve_scoring_policy(scoring_policy)
        self.rng = rng if rng is not None else random.Random()
        self.trace_enabled = trace
        self.trace_log = trace_log

        self.score = 0
        self.fixed_blanks_count: Optional[int] = None
        if blanks_count is not None:
            self.fixed_blanks_count = clamp_blanks_count(blanks_count, self.total)

        self.table = DEFAULT_TABLE
        self.values: CellValues = []
        self.blanks_count = 0
        self.blank_indexes: BlankSet = set()
        self.cell_states: AnswerStates = []
        self.round_completed = False

        self.set_table(table, start_round=False)
        self.new_round()

    def set_table(self, n: object, start_round: bool = True) -> int:
        self.table = coerce_table(n)
        self.values = table_values(self.table, self.total)
        self._trace(f"Table set to {self.table}")
        if start_round:
            self.new_round()
        return self.table

    def set_grid(self, rows: int, cols: int) -> QuizSnapshot:
        validate_grid_size(rows, cols)
        self.rows = rows
        self.cols = cols
        self.total = rows * cols
        self.values = table_values(self.table, self.total)
        if self.fixed_blanks_count is not None:
            self.fixed_blanks_count = clamp_blanks_count(self.fixed_blanks_count, self.total)
        self.score = 0
        self._trace(f"Grid resized to {rows}x{cols}, score reset")
        return self.new_round()

    def set_blanks_count(self, k: Optional[object]) -> int:
        if k is None:
            self.fixed_blanks_count = None
            self._trace("Blank count follows score")
        else:
            self.fixed_blanks_count = clamp_blanks_count(k, self.total)
            self._trace(f"Blank count fixed at {self.fixed_blanks_count}")
        return self.compute_blanks_count()

    def compute_blanks_count(self) -> int:
        if self.fixed_blanks_count is not None:
            return self.fixed_blanks_count
        return blanks_for_score(self.score, self.total)

    def new_round(self) -> QuizSnapshot:
        self.blanks_count = self.compute_blanks_count()
        self.blank_indexes = pick_blank_indexes(self.total, self.blanks_count, self.rng)
        self.cell_states = [CellState.UNANSWERED] * self.total
        self.round_completed = False
        self._trace(f"New round: blanks={sorted(self.blank_indexes)}, score={self.score}")
        return self.get_state()

    def is_blank(self, index: int) -> bool:
        return check_index(index, self.total) in self.blank_indexes

    def get_value(self, index: int) -> int:
        return self.values[check_index(index, self.total)]

    def check(self, index: int, value: AnswerInput) -> CheckResult:
        correct_value = self.get_value(index)
        answer = parse_number(value)
        ok = answer is not None and answer == correct_value

        just_solved = False
        scored = False
        if ok:
            if self.cell_states[index] != CellState.CORRECT:
                self.cell_states[index] = CellState.CORRECT
                just_solved = True
                if self.scoring_policy == ScoringPolicy.PER_CELL:
                    self.score += 1
                    scored = True
        else:
            # a wrong answer always overwrites, even a previously correct cell
            self.cell_states[index] = CellState.INCORRECT

        self._trace(
            f"Check cell {index}: input={value!r}, expected={correct_value}, "
            f"correct={ok}, just_solved={just_solved}, score={self.score}"
        )
        return CheckResult(
            index=index,
            correct=ok,
            correct_value=correct_value,
            just_solved=just_solved,
            scored=scored,
            score=self.score,
        )

    def is_round_complete(self) -> bool:
        return all(self.cell_states[index] == CellState.CORRECT for index in self.blank_indexes)

    def complete_round(self) -> int:
        if not self.round_completed:
            if self.scoring_policy == ScoringPolicy.PER_ROUND:
                self.score += 1
            self.round_completed = True
            self._trace(f"Round completed, score={self.score}")
        return self.score

    def reset_score(self) -> None:
        self.score = 0
        self._trace("Score reset")

    def get_state(self) -> QuizSnapshot:
        return QuizSnapshot(
            table=self.table,
            rows=self.rows,
            cols=self.cols,
            total=self.total,
            values=tuple(self.values),
            blank_indexes=frozenset(self.blank_indexes),
            cell_states=tuple(self.cell_states),
            score=self.score,
            blanks_count=self.blanks_count,
            round_completed=self.round_completed,
            scoring_policy=self.scoring_policy,
            fixed_blanks_count=self.fixed_blanks_count,
        )

    def _trace(self, message: str) -> None:
        trace(self.trace_enabled, self.trace_log, message)
