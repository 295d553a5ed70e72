"""
Acceptance tests — alignment and band fields

Rules:
  - one merged row per distinct label, sorted by the frequency comparator.
  - a source lacking a label contributes no fields to that row.
  - band fields are non-null only when baseline AND goal are finite numbers.
"""

import math

from projviz.models import SourceSeries
from projviz.services.aligner import align_series, filter_rows_by_fields, visible_fields
from projviz.services.derived_metrics import add_band_fields, band_fields


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _row(label, **metrics):
    base = {"label": label, "revenue": None, "net_profit": None, "gross_profit": None, "expenses": None}
    base.update(metrics)
    return base


HIST = SourceSeries("monthly", [_row("2023-11", revenue=90), _row("2023-12", revenue=95)])
BASELINE = SourceSeries("monthly", [_row("2023-12", revenue=100), _row("2024-01", revenue=140_000)])
GOAL = SourceSeries("monthly", [_row("2024-01", revenue=150_000), _row("2024-02", revenue=155_000)])


# ---------------------------------------------------------------------------
# align_series
# ---------------------------------------------------------------------------

def test_row_count_equals_distinct_labels():
    rows = align_series({"hist": HIST, "proj": BASELINE, "goal": GOAL}, "monthly")
    labels = [r["label"] for r in rows]
    assert labels == ["2023-11", "2023-12", "2024-01", "2024-02"]
    assert len(labels) == len(set(labels))


def test_sources_without_label_contribute_nothing():
    rows = align_series({"hist": HIST, "proj": BASELINE, "goal": GOAL}, "monthly")
    nov = rows[0]
    assert nov["revenue_hist"] == 90
    assert "revenue_proj" not in nov
    assert "revenue_goal" not in nov

    dec = rows[1]
    assert dec["revenue_hist"] == 95
    assert dec["revenue_proj"] == 100
    assert dec["expenses_proj"] is None


def test_sorting_uses_frequency_not_string_order():
    a = SourceSeries("quarterly", [_row("2024-Q1"), _row("2023-Q4")])
    rows = align_series({"proj": a}, "quarterly")
    assert [r["label"] for r in rows] == ["2023-Q4", "2024-Q1"]


def test_empty_sources():
    assert align_series({}, "annual") == []
    assert align_series({"hist": SourceSeries("annual"), "proj": None}, "annual") == []


# ---------------------------------------------------------------------------
# Selection filtering (caller side)
# ---------------------------------------------------------------------------

def test_filter_rows_by_visible_fields():
    rows = align_series({"hist": HIST, "proj": BASELINE, "goal": GOAL}, "monthly")
    fields = visible_fields(["revenue"], ["goal"])
    assert fields == ["revenue_goal"]
    kept = filter_rows_by_fields(rows, fields)
    assert [r["label"] for r in kept] == ["2024-01", "2024-02"]
    assert filter_rows_by_fields(rows, []) == []


# ---------------------------------------------------------------------------
# Band fields
# ---------------------------------------------------------------------------

def test_band_example_from_one_year_view():
    rows = add_band_fields(align_series({"proj": BASELINE, "goal": GOAL}, "monthly"))
    jan = next(r for r in rows if r["label"] == "2024-01")
    assert jan["revenue_band_min"] == 140_000
    assert jan["revenue_band_span"] == 10_000
    assert jan["revenue_delta"] == 10_000


def test_negative_delta_when_goal_below_baseline():
    assert band_fields(200.0, 150.0) == (150.0, 50.0, -50.0)


def test_band_fields_absent_unless_both_finite():
    assert band_fields(None, 1.0) == (None, None, None)
    assert band_fields(1.0, math.nan) == (None, None, None)
    assert band_fields(math.inf, 1.0) == (None, None, None)
    assert band_fields(True, 1.0) == (None, None, None)

    rows = add_band_fields(align_series({"hist": HIST, "proj": BASELINE, "goal": GOAL}, "monthly"))
    for r in rows:
        for m in ("revenue", "net_profit", "gross_profit", "expenses"):
            for suffix in ("band_min", "band_span", "delta"):
                key = f"{m}_{suffix}"
                assert key in r
                if r[key] is not None:
                    assert r.get(f"{m}_proj") is not None and r.get(f"{m}_goal") is not None


def test_add_band_fields_does_not_mutate_input():
    rows = align_series({"proj": BASELINE, "goal": GOAL}, "monthly")
    snapshot = [dict(r) for r in rows]
    add_band_fields(rows)
    assert rows == snapshot
