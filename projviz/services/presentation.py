"""
Display helpers for the chart layer: number formatting, tooltip rows and the
summary KPI cards.
"""

import math
from collections.abc import Iterable
from typing import Any

from projviz.models import METRIC_KEYS, METRIC_LABELS, VisibleSources, field_name


def pretty_number(n: Any) -> str:
    """Thousands-separated number, at most 3 decimals; "" for None."""
    if n is None:
        return ""
    try:
        f = float(n)
    except (TypeError, ValueError):
        return str(n)
    if not math.isfinite(f):
        return str(f)
    if f.is_integer():
        return f"{int(f):,}"
    return f"{f:,.3f}".rstrip("0").rstrip(".")


def tooltip_entries(
    row: dict[str, Any],
    metrics: Iterable[str] = METRIC_KEYS,
    sources: VisibleSources | None = None,
) -> list[dict[str, Any]]:
    """One entry per metric with a value in any visible source of row.

    Hidden sources are left out of the entry even though the row still
    carries their fields.
    """
    suffixes = (sources or VisibleSources()).suffixes()
    out = []
    for m in metrics:
        values = {s: row.get(field_name(m, s)) for s in suffixes}
        if all(v is None for v in values.values()):
            continue
        entry: dict[str, Any] = {"key": m, "label": METRIC_LABELS.get(m, m)}
        for s, v in values.items():
            entry[s] = v
            entry[f"{s}_text"] = pretty_number(v)
        out.append(entry)
    return out


def kpi_summary(view: Any) -> list[dict[str, Any]]:
    return [
        {"key": "hist", "label": "Historical points", "value": view.historical_count},
        {"key": "proj", "label": "Projection points", "value": view.baseline_count},
        {"key": "goal", "label": "Goal points", "value": view.goal_count},
        {"key": "metrics", "label": "Visible metrics", "value": view.visible_metric_count},
    ]
