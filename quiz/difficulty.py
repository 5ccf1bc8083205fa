import random
from typing import Optional

from rules.rules import BLANKS_SCORE_STEP, MIN_BLANKS

from .types import BlankSet


def blanks_for_score(score: int, total: int) -> int:
    # 1 blank for scores 0-5, 2 for 6-10, 3 for 11-15, ... capped at total
    base = MIN_BLANKS + max(0, score - 1) // BLANKS_SCORE_STEP
    return min(total, base)


def shuffle_in_place(items: list[int], rng: random.Random) -> list[int]:
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def pick_blank_indexes(total: int, count: int, rng: Optional[random.Random] = None) -> BlankSet:
    """Draw `count` distinct cell positions from range(total), every subset equally likely."""
    if count < 0 or count > total:
        raise ValueError(f"cannot pick {count} blanks from {total} cells")
    if rng is None:
        rng = random.Random()
    positions = shuffle_in_place(list(range(total)), rng)
    return set(positions[:count])
