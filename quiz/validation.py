import math
import re
from typing import Optional, Union

from rules.rules import DEFAULT_TABLE, MIN_BLANKS

from .types import ScoringPolicy


_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

Number = Union[int, float]


def resolve_scoring_policy(scoring_policy: Union[str, ScoringPolicy]) -> ScoringPolicy:
    try:
        return ScoringPolicy(scoring_policy)
    except ValueError as exc:
        raise ValueError("scoring_policy must be one of: per_round, per_cell") from exc


def validate_grid_size(rows: int, cols: int) -> None:
    for name, value in (("rows", rows), ("cols", cols)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an integer")
        if value < 1:
            raise ValueError(f"{name} must be at least 1")


def check_index(index: int, total: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise IndexError(f"cell index must be an integer, got {index!r}")
    if index < 0 or index >= total:
        raise IndexError(f"cell index {index} is out of range for a grid of {total} cells")
    return index


def parse_number(value: object) -> Optional[Number]:
    """Read a player- or config-supplied value as a number.

    Strings are trimmed and must be a plain decimal literal in full; anything
    else (empty text, trailing characters, nan/inf, booleans) gives None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None

    text = str(value).strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        return None
    try:
        if not any(marker in text for marker in ".eE"):
            return int(text)
        number = float(text)
    except ValueError:
        # int() refuses literals past the interpreter digit limit
        return None
    return number if math.isfinite(number) else None


def coerce_table(value: object) -> int:
    number = parse_number(value)
    if number is None or number == 0 or number != int(number):
        return DEFAULT_TABLE
    return int(number)


def clamp_blanks_count(value: object, total: int) -> int:
    number = parse_number(value)
    if number is None:
        return total if _is_oversized(value) else MIN_BLANKS
    return max(MIN_BLANKS, min(total, int(number)))


def _is_oversized(value: object) -> bool:
    if isinstance(value, float):
        return value == math.inf
    if isinstance(value, (bool, int)) or value is None:
        return False
    text = str(value).strip()
    return bool(_NUMBER_PATTERN.fullmatch(text)) and not text.startswith("-")
