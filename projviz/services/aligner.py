"""
Outer join of SourceSeries on period label.

Each source is registered under a suffix ("hist", "proj", "goal"). A merged
row carries <metric>_<suffix> for every metric of every source that has the
row's label; a source without the label adds nothing to that row.

Selection filtering is NOT done here. Callers apply filter_rows_by_fields on
the merged table once they know which fields are visible.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from projviz.models import METRIC_KEYS, SourceSeries, field_name
from projviz.normalizers.periods import label_sort_key

logger = logging.getLogger(__name__)


def align_series(
    sources: Mapping[str, SourceSeries | None],
    freq: str,
) -> list[dict[str, Any]]:
    """Merge sources into one row per distinct label, sorted under freq."""
    by_label: dict[str, dict[str, Any]] = {}
    for suffix, series in sources.items():
        if series is None:
            continue
        for r in series.rows:
            label = r["label"]
            row = by_label.get(label)
            if row is None:
                row = {"label": label}
                by_label[label] = row
            for m in METRIC_KEYS:
                row[field_name(m, suffix)] = r.get(m)

    rows = sorted(by_label.values(), key=lambda r: label_sort_key(r["label"], freq))
    logger.debug("[Align] %d sources -> %d rows (%s)", len(sources), len(rows), freq)
    return rows


def visible_fields(metrics: Iterable[str], suffixes: Iterable[str]) -> list[str]:
    """Field names for every (metric, source) pair currently on screen."""
    suffixes = list(suffixes)
    return [field_name(m, s) for m in metrics for s in suffixes]


def filter_rows_by_fields(
    rows: list[dict[str, Any]],
    fields: Iterable[str],
) -> list[dict[str, Any]]:
    """Keep rows that have at least one non-null value among fields."""
    fields = list(fields)
    return [r for r in rows if any(r.get(f) is not None for f in fields)]
