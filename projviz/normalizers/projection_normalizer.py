"""
Projection series normalizer.

Projection records arrive keyed by whichever period field matches the
engine's output frequency:

  {"month": "2024-01", ...}    monthly
  {"quarter": "2024-Q1", ...}  quarterly
  {"year": 2024, ...}          annual

This module resolves that shape once into SourceSeries rows of
{"label": ..., revenue, net_profit, gross_profit, expenses} so nothing
downstream branches on field presence again.

Key behaviors:
  - frequency is inferred from the FIRST record only
  - empty input keeps the caller's default frequency
  - every metric key is present on every row (missing -> None)
  - malformed labels are skipped with a warning, never sorted blindly
  - duplicate labels: last record wins
  - goal-based series only exist for the two monthly timeframes; the 1-year
    view keeps the first 12 chronological rows
"""

import logging
from typing import Any

from projviz.errors import ParseError
from projviz.models import GOAL_SOURCE_KEY, SourceSeries, resolve_timeframe
from projviz.normalizers.periods import label_sort_key, parse_label
from projviz.normalizers.values import metric_values

logger = logging.getLogger(__name__)


def _as_array(v: Any) -> list:
    return v if isinstance(v, list) else []


def _has(record: dict[str, Any], key: str) -> bool:
    v = record.get(key)
    return v is not None and v != ""


# ---------------------------------------------------------------------------
# Frequency inference
# ---------------------------------------------------------------------------

def infer_frequency(records: Any, default: str = "monthly") -> str:
    """Infer the series frequency from the first record's period field."""
    rows = _as_array(records)
    if not rows:
        return default
    first = rows[0] if isinstance(rows[0], dict) else {}
    if _has(first, "month"):
        return "monthly"
    if _has(first, "quarter"):
        return "quarterly"
    return "annual"


def record_label(record: dict[str, Any]) -> str:
    """Period label from whichever identifying field the record carries."""
    if _has(record, "month"):
        return str(record["month"]).strip()
    if _has(record, "quarter"):
        return str(record["quarter"]).strip()
    year = record.get("year")
    if isinstance(year, float) and year.is_integer():
        year = int(year)
    return str(year).strip()


# ---------------------------------------------------------------------------
# normalize_projection_records
# ---------------------------------------------------------------------------

def normalize_projection_records(
    records: Any,
    default_freq: str = "monthly",
    source: str = "projection",
) -> SourceSeries:
    """
    Normalize a raw projection array into a sorted SourceSeries.

    Non-list input yields an empty series at default_freq.
    """
    rows_in = _as_array(records)
    freq = infer_frequency(rows_in, default_freq)
    if not rows_in:
        return SourceSeries(freq=freq, rows=[])

    logger.debug("[Normalize] %s: %d raw records, inferred freq=%s",
                 source, len(rows_in), freq)

    by_label: dict[str, dict[str, Any]] = {}
    for i, rec in enumerate(rows_in):
        if not isinstance(rec, dict):
            logger.warning("[Normalize] %s: record %d is not an object. Skipping.", source, i)
            continue
        label = record_label(rec)
        try:
            parse_label(label, freq)
        except ParseError as exc:
            logger.warning("[Normalize] %s: record %d skipped: %s", source, i, exc)
            continue
        if label in by_label:
            logger.warning("[Normalize] %s: duplicate label %s, keeping last record.", source, label)
        by_label[label] = {"label": label, **metric_values(rec)}

    rows = sorted(by_label.values(), key=lambda r: label_sort_key(r["label"], freq))
    logger.debug("[Normalize] %s: %d valid rows", source, len(rows))
    return SourceSeries(freq=freq, rows=rows)


# ---------------------------------------------------------------------------
# Timeframe lookups
# ---------------------------------------------------------------------------

def projection_series_for_key(
    projections_data: dict[str, Any] | None,
    timeframe_key: str,
    default_freq: str = "monthly",
) -> SourceSeries:
    """Baseline projection series for one timeframe key."""
    if not isinstance(projections_data, dict):
        return SourceSeries(freq=default_freq, rows=[])
    return normalize_projection_records(
        projections_data.get(timeframe_key), default_freq, source=f"baseline:{timeframe_key}",
    )


def goal_series_for_key(
    goal_based_projections: dict[str, Any] | None,
    timeframe_key: str,
) -> SourceSeries:
    """
    Goal-based projection series for one timeframe key.

    Only the goal-carrying timeframes read the three-year monthly goal
    array; for every other key the series is empty. The goal series is
    always monthly.
    """
    tf = resolve_timeframe(timeframe_key)
    if tf.key != timeframe_key or not tf.has_goal or not isinstance(goal_based_projections, dict):
        return SourceSeries(freq="monthly", rows=[])

    series = normalize_projection_records(
        goal_based_projections.get(GOAL_SOURCE_KEY), "monthly", source=f"goal:{timeframe_key}",
    )
    if series.freq != "monthly":
        logger.warning("[Normalize] goal series for %s is %s, expected monthly. Ignoring.",
                       timeframe_key, series.freq)
        return SourceSeries(freq="monthly", rows=[])
    if tf.goal_limit is not None:
        series = SourceSeries(freq="monthly", rows=series.rows[: tf.goal_limit])
    return series
