"""
Historical roll-up.

Monthly historical records become a SourceSeries at the requested frequency:

  monthly    one row per record, absent metrics stay None
  quarterly  sum per "YYYY-Qn" bucket, absent counts as 0
  annual     sum per "YYYY" bucket, absent counts as 0

A bucket reports 0 (not None) for a metric that had no contributing value
at all. Sparse charts depend on this, so it is kept as-is.
"""

import logging
from typing import Any

from projviz.errors import ParseError
from projviz.models import METRIC_KEYS, SourceSeries
from projviz.normalizers.periods import bucket_label, label_sort_key
from projviz.normalizers.values import metric_values

logger = logging.getLogger(__name__)


def _valid_records(old_monthly: list[Any], freq: str):
    """Yield (bucket_label, record) for every usable monthly record."""
    for i, rec in enumerate(old_monthly):
        if not isinstance(rec, dict):
            logger.warning("[Aggregate] record %d is not an object. Skipping.", i)
            continue
        try:
            label = bucket_label(rec.get("month"), freq)
        except ParseError as exc:
            logger.warning("[Aggregate] record %d skipped: %s", i, exc)
            continue
        yield label, rec


def aggregate_historical(old_monthly: Any, freq: str) -> SourceSeries:
    """
    Aggregate monthly historical records to freq.

    Non-list input yields an empty series (no error).
    """
    if not isinstance(old_monthly, list):
        return SourceSeries(freq=freq, rows=[])

    if freq == "monthly":
        by_label: dict[str, dict[str, Any]] = {}
        for label, rec in _valid_records(old_monthly, freq):
            if label in by_label:
                logger.warning("[Aggregate] duplicate month %s, keeping last record.", label)
            by_label[label] = {"label": label, **metric_values(rec)}
        rows = list(by_label.values())
    else:
        buckets: dict[str, dict[str, Any]] = {}
        for label, rec in _valid_records(old_monthly, freq):
            bucket = buckets.get(label)
            if bucket is None:
                bucket = {"label": label, **{k: 0 for k in METRIC_KEYS}}
                buckets[label] = bucket
            for k, v in metric_values(rec).items():
                bucket[k] += v if v is not None else 0
        rows = list(buckets.values())

    rows.sort(key=lambda r: label_sort_key(r["label"], freq))
    logger.debug("[Aggregate] %d monthly records -> %d %s rows",
                 len(old_monthly), len(rows), freq)
    return SourceSeries(freq=freq, rows=rows)
