"""
Y-axis display range for the visible fields.

Rules:
  - no finite values                        -> AUTO
  - every finite value equal                -> AUTO
  - span = max(1, max - min)
  - span / |max| < FLAT_RATIO (nearly flat) -> AUTO
  - pad PAD_RATIO * span on both sides, lower bound clamped at 0
  - padded range empty or < MIN_FILL_RATIO of its upper bound -> AUTO
  - else (lower, upper)

Financial quantities are treated as non-negative for axis purposes.
"""

import logging
from collections.abc import Iterable
from typing import Any

from projviz.models import AUTO_RANGE
from projviz.normalizers.values import is_num

logger = logging.getLogger(__name__)

FLAT_RATIO = 0.05
PAD_RATIO = 0.08
MIN_FILL_RATIO = 0.10


def _finite_values(rows: list[dict[str, Any]], fields: list[str]) -> list[float]:
    return [r.get(f) for r in rows for f in fields if is_num(r.get(f))]


def is_auto(display_range: tuple) -> bool:
    return tuple(display_range) == AUTO_RANGE


def compute_display_range(
    rows: list[dict[str, Any]],
    fields: Iterable[str],
) -> tuple[float, float] | tuple[str, str]:
    """Padded [lower, upper] over fields in rows, or AUTO_RANGE."""
    fields = list(fields)
    vals = _finite_values(rows, fields)
    if not vals:
        logger.debug("[Range] no finite values across %d fields -> auto", len(fields))
        return AUTO_RANGE

    lo, hi = min(vals), max(vals)
    if lo == hi:
        logger.debug("[Range] all values equal (%s) -> auto", hi)
        return AUTO_RANGE

    span = max(1.0, hi - lo)
    if hi != 0 and span / abs(hi) < FLAT_RATIO:
        logger.debug("[Range] nearly flat (span=%s max=%s) -> auto", span, hi)
        return AUTO_RANGE

    pad = span * PAD_RATIO
    lower = max(0.0, lo - pad)
    upper = hi + pad
    if upper <= lower or (upper - lower) / abs(upper) < MIN_FILL_RATIO:
        logger.debug("[Range] padded range [%s, %s] too cramped -> auto", lower, upper)
        return AUTO_RANGE

    return lower, upper
