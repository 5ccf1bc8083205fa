from enum import Enum
from typing import Union


class CellState(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class ScoringPolicy(str, Enum):
    PER_ROUND = "per_round"
    PER_CELL = "per_cell"


CellValues = list[int]
BlankSet = set[int]
AnswerStates = list[CellState]
AnswerInput = Union[str, int, float]
TraceLog = list[str]
