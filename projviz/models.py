"""
Shared vocabulary for the alignment engine.

Single source of truth for:
  - the closed metric set and its display labels
  - the five selectable timeframes and their frequency
  - which timeframes carry a goal-based projection
  - source suffixes used to name merged-row fields
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Frequency = Literal["monthly", "quarterly", "annual"]

DatasetMode = Literal["old", "proj", "both"]

# Sentinel understood by the chart layer as "pick your own scaling"
AUTO_RANGE: tuple[str, str] = ("auto", "auto")


# ---------------------------------------------------------------------------
# Metric registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MetricSpec:
    key: str
    label: str


METRICS: tuple[MetricSpec, ...] = (
    MetricSpec("revenue", "Revenue"),
    MetricSpec("net_profit", "Net Profit"),
    MetricSpec("gross_profit", "Gross Profit"),
    MetricSpec("expenses", "Expenses"),
)

METRIC_KEYS: tuple[str, ...] = tuple(m.key for m in METRICS)
METRIC_LABELS: dict[str, str] = {m.key: m.label for m in METRICS}


# ---------------------------------------------------------------------------
# Timeframe registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeframeSpec:
    key: str
    label: str
    freq: Frequency
    has_goal: bool = False
    goal_limit: int | None = None   # keep only the first N sorted goal rows


TIMEFRAMES: tuple[TimeframeSpec, ...] = (
    TimeframeSpec("one_year_monthly", "1 Year (Monthly)", "monthly", has_goal=True, goal_limit=12),
    TimeframeSpec("three_years_monthly", "3 Years (Monthly)", "monthly", has_goal=True),
    TimeframeSpec("five_years_quarterly", "5 Years (Quarterly)", "quarterly"),
    TimeframeSpec("ten_years_annual", "10 Years (Annual)", "annual"),
    TimeframeSpec("fifteen_years_annual", "15 Years (Annual)", "annual"),
)

TIMEFRAMES_BY_KEY: dict[str, TimeframeSpec] = {t.key: t for t in TIMEFRAMES}

# Both goal-carrying timeframes read this array of goal_based_projections
GOAL_SOURCE_KEY = "three_years_monthly"


def resolve_timeframe(key: str | None) -> TimeframeSpec:
    """Return the timeframe for key, falling back to the first entry."""
    return TIMEFRAMES_BY_KEY.get(key or "", TIMEFRAMES[0])


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

HIST = "hist"
PROJ = "proj"
GOAL = "goal"
SOURCE_SUFFIXES: tuple[str, ...] = (HIST, PROJ, GOAL)

BAND_SUFFIXES: tuple[str, ...] = ("band_min", "band_span", "delta")


def field_name(metric: str, suffix: str) -> str:
    return f"{metric}_{suffix}"


@dataclass
class SourceSeries:
    """Rows of {"label": ..., <metric>: value} sorted ascending by label."""
    freq: Frequency
    rows: list[dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def labels(self) -> list[str]:
        return [r["label"] for r in self.rows]


@dataclass(frozen=True)
class VisibleSources:
    historical: bool = True
    baseline: bool = True
    goal: bool = True

    @classmethod
    def from_dataset_mode(cls, mode: DatasetMode) -> "VisibleSources":
        if mode == "old":
            return cls(historical=True, baseline=False, goal=False)
        if mode == "proj":
            return cls(historical=False, baseline=True, goal=True)
        return cls()

    def suffixes(self) -> list[str]:
        out = []
        if self.historical:
            out.append(HIST)
        if self.baseline:
            out.append(PROJ)
        if self.goal:
            out.append(GOAL)
        return out
