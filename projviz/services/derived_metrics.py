"""
Band fields between the baseline and goal projections.

Per metric and merged row, when both <metric>_proj and <metric>_goal are
finite numbers:

  <metric>_band_min  = min(baseline, goal)
  <metric>_band_span = |goal - baseline|
  <metric>_delta     = goal - baseline

Otherwise all three are explicitly None. Null inputs propagate as null
(never coerced to 0).
"""

from collections.abc import Iterable
from typing import Any

from projviz.models import GOAL, METRIC_KEYS, PROJ, field_name
from projviz.normalizers.values import is_num


def band_fields(baseline: Any, goal: Any) -> tuple[float | None, float | None, float | None]:
    """(band_min, band_span, delta) for one pair, or three Nones."""
    if not is_num(baseline) or not is_num(goal):
        return None, None, None
    return min(baseline, goal), abs(goal - baseline), goal - baseline


def add_band_fields(
    rows: list[dict[str, Any]],
    metrics: Iterable[str] = METRIC_KEYS,
) -> list[dict[str, Any]]:
    """Return copies of rows with band fields set for every metric."""
    metrics = list(metrics)
    out: list[dict[str, Any]] = []
    for r in rows:
        row = dict(r)
        for m in metrics:
            lo, span, delta = band_fields(r.get(field_name(m, PROJ)), r.get(field_name(m, GOAL)))
            row[field_name(m, "band_min")] = lo
            row[field_name(m, "band_span")] = span
            row[field_name(m, "delta")] = delta
        out.append(row)
    return out
