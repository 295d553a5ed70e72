import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, TextIO, get_args

from projviz import config
from projviz.errors import SchemaError
from projviz.loaders.payload_loader import load_chart_sources
from projviz.models import (
    BAND_SUFFIXES,
    METRIC_KEYS,
    SOURCE_SUFFIXES,
    TIMEFRAMES_BY_KEY,
    DatasetMode,
    VisibleSources,
    field_name,
)
from projviz.orchestrator.chart_orchestrator import build_chart_view
from projviz.services.presentation import kpi_summary

logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def table_columns(metrics: list[str]) -> list[str]:
    cols = ["label"]
    for m in metrics:
        cols.extend(field_name(m, s) for s in SOURCE_SUFFIXES)
        cols.extend(field_name(m, s) for s in BAND_SUFFIXES)
    return cols


def write_table(rows: list[dict[str, Any]], columns: list[str], handle: TextIO) -> None:
    writer = csv.DictWriter(handle, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for r in rows:
        writer.writerow({c: r.get(c) for c in columns})


def parse_metrics(value: str | None) -> list[str]:
    if not value:
        return list(METRIC_KEYS)
    wanted = [v.strip() for v in value.split(",") if v.strip()]
    unknown = [v for v in wanted if v not in METRIC_KEYS]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown metric(s): {', '.join(unknown)}")
    return wanted


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export the aligned historical/projection table as CSV.")
    parser.add_argument("--data", type=Path, help="data.json with old_data")
    parser.add_argument("--projections", type=Path, help="projections.json with projections_data")
    parser.add_argument("--timeframe", default=config.DEFAULT_TIMEFRAME, choices=sorted(TIMEFRAMES_BY_KEY))
    parser.add_argument("--mode", default=config.DEFAULT_DATASET_MODE, choices=list(get_args(DatasetMode)))
    parser.add_argument("--metrics", type=parse_metrics, default=list(METRIC_KEYS),
                        help="comma separated metric keys (default: all)")
    parser.add_argument("--out", type=Path, help="output CSV path (default: stdout)")
    return parser


def run_export(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        sources = load_chart_sources(args.data, args.projections)
    except SchemaError as exc:
        logger.error("%s", exc)
        return 2

    view = build_chart_view(
        sources,
        args.timeframe,
        visible_metrics=args.metrics,
        visible_sources=VisibleSources.from_dataset_mode(args.mode),
    )

    columns = table_columns(args.metrics)
    if args.out:
        with args.out.open("w", encoding="utf-8", newline="") as handle:
            write_table(view.rows, columns, handle)
        logger.info("Wrote %d rows to %s", len(view.rows), args.out)
    else:
        write_table(view.rows, columns, sys.stdout)

    for kpi in kpi_summary(view):
        logger.info("%s: %s", kpi["label"], kpi["value"])
    logger.info("Display range: %s", view.display_range)
    if view.identical_metric_labels:
        logger.info("Identical projections: %s", ", ".join(view.identical_metric_labels))
    for err in view.errors:
        logger.warning("%s", err)
    return 0


if __name__ == "__main__":
    sys.exit(run_export())
