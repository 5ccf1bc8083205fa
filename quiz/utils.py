import logging
from typing import Optional

from .types import TraceLog


logger = logging.getLogger(__name__)


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        logger.debug(message)


def table_values(table: int, total: int) -> list[int]:
    return [table * (i + 1) for i in range(total)]
