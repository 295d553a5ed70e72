"""
Chart view orchestrator.

One pure call per (sources, timeframe, visible metrics, visible sources):

  1: Aggregate historical         -> aggregator.aggregate_historical
  2: Normalize baseline           -> projection_normalizer.projection_series_for_key
  3: Goal series                  -> projection_normalizer.goal_series_for_key
  4: Align + band fields          -> aligner.align_series, derived_metrics.add_band_fields
  5: Visible rows + display range -> aligner.filter_rows_by_fields, range_calculator
  6: Identical projections        -> duplicate_detector (goal timeframes only,
                                     baseline AND goal visible)

Failure behavior:
  - Each step wrapped in try/except
  - On failure: append to errors[], set status="partial", continue with an
    empty result for that step
  - build_chart_view never raises; the caller always gets a ChartView

Nothing here keeps state between calls. A new selection means a new call
whose result replaces the previous one wholesale.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from projviz.loaders.payload_loader import ChartSources
from projviz.models import (
    AUTO_RANGE,
    GOAL,
    HIST,
    METRIC_KEYS,
    METRIC_LABELS,
    PROJ,
    SourceSeries,
    TimeframeSpec,
    VisibleSources,
    resolve_timeframe,
)
from projviz.normalizers import projection_normalizer
from projviz.services import aggregator, aligner, derived_metrics, duplicate_detector, range_calculator

logger = logging.getLogger(__name__)


class ChartView:
    def __init__(self, timeframe: TimeframeSpec):
        self.timeframe = timeframe
        self.freq: str = timeframe.freq
        self.status: str = "ok"          # "ok" or "partial"
        self.errors: list[str] = []
        self.logs: list[str] = []

        self.rows: list[dict[str, Any]] = []
        self.display_range: tuple = AUTO_RANGE
        self.identical_metrics: list[str] = []
        self.historical_count: int = 0
        self.baseline_count: int = 0
        self.goal_count: int = 0
        self.visible_metric_count: int = 0

    @property
    def identical_metric_labels(self) -> list[str]:
        return [METRIC_LABELS[m] for m in self.identical_metrics]

    def log(self, msg: str) -> None:
        logger.info(msg)
        self.logs.append(msg)

    def step_failed(self, name: str, error: str) -> None:
        self.log(f"[ChartView] FAILED: {name} - {error}")
        self.status = "partial"
        self.errors.append(f"{name} failed: {error}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeframe": self.timeframe.key,
            "freq": self.freq,
            "status": self.status,
            "rows": self.rows,
            "display_range": list(self.display_range),
            "identical_metrics": self.identical_metrics,
            "identical_metric_labels": self.identical_metric_labels,
            "counts": {
                "historical": self.historical_count,
                "baseline": self.baseline_count,
                "goal": self.goal_count,
                "visible_metrics": self.visible_metric_count,
            },
            "errors": self.errors,
        }


def _run_step(view: ChartView, name: str, fn: Callable[[], Any], fallback: Any) -> Any:
    try:
        return fn()
    except Exception as exc:  # noqa: BLE001
        logger.exception("[ChartView] %s failed for %s", name, view.timeframe.key)
        view.step_failed(name, str(exc))
        return fallback


def _baseline_for(view: ChartView, sources: ChartSources) -> SourceSeries:
    series = projection_normalizer.projection_series_for_key(
        sources.projections_data, view.timeframe.key, view.freq,
    )
    if series.freq != view.freq:
        view.log(
            f"[ChartView] WARNING: baseline for {view.timeframe.key} is {series.freq}, "
            f"timeframe is {view.freq}. Dropping baseline."
        )
        return SourceSeries(freq=view.freq, rows=[])
    return series


def build_chart_view(
    sources: ChartSources,
    timeframe_key: str | None,
    visible_metrics: Iterable[str] = METRIC_KEYS,
    visible_sources: VisibleSources | None = None,
) -> ChartView:
    """Run the whole alignment pipeline for one selection."""
    tf = resolve_timeframe(timeframe_key)
    view = ChartView(tf)
    if timeframe_key != tf.key:
        view.log(f"[ChartView] unknown timeframe {timeframe_key!r}, using {tf.key}")

    visible = visible_sources or VisibleSources()
    wanted = set(visible_metrics)
    metrics = [m for m in METRIC_KEYS if m in wanted]
    view.visible_metric_count = len(metrics)
    empty = SourceSeries(freq=view.freq, rows=[])

    hist = _run_step(view, "aggregate_historical",
                     lambda: aggregator.aggregate_historical(sources.old_data, view.freq), empty)
    baseline = _run_step(view, "normalize_baseline", lambda: _baseline_for(view, sources), empty)
    goal = _run_step(view, "goal_series",
                     lambda: projection_normalizer.goal_series_for_key(
                         sources.goal_based_projections, tf.key), empty)

    view.historical_count = len(hist)
    view.baseline_count = len(baseline)
    view.goal_count = len(goal)
    view.log(
        f"[ChartView] {tf.key}: historical={view.historical_count} "
        f"baseline={view.baseline_count} goal={view.goal_count}"
    )

    merged = _run_step(
        view, "align",
        lambda: derived_metrics.add_band_fields(
            aligner.align_series({HIST: hist, PROJ: baseline, GOAL: goal}, view.freq)
        ),
        [],
    )

    fields = aligner.visible_fields(metrics, visible.suffixes())
    view.rows = aligner.filter_rows_by_fields(merged, fields)
    view.display_range = _run_step(
        view, "display_range",
        lambda: range_calculator.compute_display_range(view.rows, fields), AUTO_RANGE,
    )

    if tf.has_goal and visible.baseline and visible.goal:
        view.identical_metrics = _run_step(
            view, "detect_identical",
            lambda: duplicate_detector.detect_identical_metrics(view.rows, metrics), [],
        )

    view.log(f"[ChartView] {len(view.rows)} visible rows, range={view.display_range}")
    return view
