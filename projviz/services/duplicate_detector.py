"""
Flags metrics whose baseline and goal projections are indistinguishable.

A metric is "identical" when at least one row carries both values and no
such row differs by more than the tolerance. Rows missing either side are
skipped, not counted as mismatches.
"""

import logging
from collections.abc import Iterable
from typing import Any

from projviz.config import IDENTICAL_TOLERANCE
from projviz.models import GOAL, PROJ, field_name
from projviz.normalizers.values import is_num

logger = logging.getLogger(__name__)


def is_identical(
    rows: list[dict[str, Any]],
    metric: str,
    tolerance: float = IDENTICAL_TOLERANCE,
) -> bool:
    base_f, goal_f = field_name(metric, PROJ), field_name(metric, GOAL)
    compared = 0
    for r in rows:
        b, g = r.get(base_f), r.get(goal_f)
        if not is_num(b) or not is_num(g):
            continue
        if abs(g - b) > tolerance:
            return False
        compared += 1
    return compared > 0


def detect_identical_metrics(
    rows: list[dict[str, Any]],
    metrics: Iterable[str],
    tolerance: float = IDENTICAL_TOLERANCE,
) -> list[str]:
    """Metric keys (in the given order) whose two projections match everywhere."""
    identical = [m for m in metrics if is_identical(rows, m, tolerance)]
    if identical:
        logger.info("[Duplicates] baseline == goal for: %s", ", ".join(identical))
    return identical
