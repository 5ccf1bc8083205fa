import json
import random
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, StrictInt, ValidationError

from rules.rules import DEFAULT_COLS, DEFAULT_ROWS, DEFAULT_TABLE

from .engine import QuizRound
from .types import ScoringPolicy, TraceLog


class QuizConfig(BaseModel):
    table: Union[int, float, str, None] = Field(
        default=DEFAULT_TABLE,
        description="Times-table base. Zero or non-numeric values fall back to 7.",
    )
    rows: int = Field(default=DEFAULT_ROWS, ge=1, description="Number of grid rows")
    cols: int = Field(default=DEFAULT_COLS, ge=1, description="Number of grid columns")
    blanks_count: Optional[int] = Field(
        default=None,
        description="Fixed number of blanks per round (clamped to the grid). Null scales blanks with the score.",
    )
    scoring_policy: ScoringPolicy = Field(
        default=ScoringPolicy.PER_ROUND,
        description="Scoring policy: per_round or per_cell.",
    )
    seed: Optional[int] = Field(default=None, description="Seed for blank selection. Null draws fresh entropy.")


class AnswerSubmission(BaseModel):
    index: StrictInt = Field(..., description="Cell position, 0-based, row-major")
    value: Union[int, float, str] = Field(..., description="Answer as typed by the player")


def build_engine(config: QuizConfig, trace: bool = False, trace_log: Optional[TraceLog] = None) -> QuizRound:
    return QuizRound(
        table=config.table,
        rows=config.rows,
        cols=config.cols,
        blanks_count=config.blanks_count,
        scoring_policy=config.scoring_policy,
        rng=random.Random(config.seed),
        trace=trace,
        trace_log=trace_log,
    )


def load_quiz_config_from_file(input_path: str) -> tuple[QuizConfig, list[AnswerSubmission]]:
    path = Path(input_path)
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"input file not found: {input_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"input file is not valid JSON: {input_path}") from exc

    if not isinstance(payload, dict):
        raise ValueError("JSON root must be an object")

    answers_payload = payload.pop("answers", None) or []
    if not isinstance(answers_payload, list):
        raise ValueError("'answers' must be a list of {index, value} objects")

    try:
        config = QuizConfig(**payload)
        answers = [AnswerSubmission(**entry) for entry in answers_payload]
    except (TypeError, ValidationError) as exc:
        raise ValueError(f"invalid quiz config: {exc}") from exc

    return config, answers
