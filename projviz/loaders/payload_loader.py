"""
Upload loader for data.json and projections.json.

Parses JSON text and checks the top-level shape before anything reaches the
engine:

  data.json         { "old_data": [ ... ] }
  projections.json  { "projections_data": { ... },
                      "goal_based_projections": { "three_years_monthly": [ ... ] } }

Wrong shapes, invalid JSON and unreadable files raise SchemaError with a
user-facing message.
Inner arrays are NOT validated here; the engine tolerates empty or odd
records and skips them record by record.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from projviz.errors import SchemaError

logger = logging.getLogger(__name__)

HISTORICAL_SHAPE_MSG = "data.json must contain { old_data: [...] }"
PROJECTION_SHAPE_MSG = "projections.json must contain { projections_data: { ... } }"


# ---------------------------------------------------------------------------
# Payload models
# ---------------------------------------------------------------------------

class HistoricalPayload(BaseModel):
    old_data: list[Any]


class ProjectionPayload(BaseModel):
    projections_data: dict[str, Any]
    goal_based_projections: dict[str, Any] | None = None

    @field_validator("goal_based_projections", mode="before")
    @classmethod
    def _drop_malformed_goal(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, dict):
            logger.warning("[Loader] goal_based_projections is %s, not an object. Ignoring.",
                           type(v).__name__)
            return None
        return v


@dataclass
class ChartSources:
    """Everything the engine consumes, already parsed."""
    old_data: list[Any] = field(default_factory=list)
    projections_data: dict[str, Any] = field(default_factory=dict)
    goal_based_projections: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_historical_payload(obj: Any) -> list[Any]:
    """Return old_data from an already-decoded data.json document."""
    try:
        return HistoricalPayload.model_validate(obj).old_data
    except ValidationError as exc:
        logger.warning("[Loader] rejected data.json: %s", exc.errors()[0].get("msg"))
        raise SchemaError(HISTORICAL_SHAPE_MSG) from exc


def parse_projection_payload(obj: Any) -> ProjectionPayload:
    """Return the validated projections.json document."""
    try:
        return ProjectionPayload.model_validate(obj)
    except ValidationError as exc:
        logger.warning("[Loader] rejected projections.json: %s", exc.errors()[0].get("msg"))
        raise SchemaError(PROJECTION_SHAPE_MSG) from exc


def _decode(text: str, expectation: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise SchemaError(f"Invalid {expectation} JSON.") from exc


def _read(path: str | Path, expectation: str) -> Any:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SchemaError(f"Invalid {expectation} JSON.") from exc
    except OSError as exc:
        logger.warning("[Loader] cannot read %s: %s", p, exc)
        raise SchemaError(f"Cannot read {expectation}: {exc.strerror or exc}") from exc
    return _decode(text, expectation)


def load_historical_text(text: str) -> list[Any]:
    return parse_historical_payload(_decode(text, "data.json"))


def load_projection_text(text: str) -> ProjectionPayload:
    return parse_projection_payload(_decode(text, "projections.json"))


def load_historical_file(path: str | Path) -> list[Any]:
    old_data = parse_historical_payload(_read(path, "data.json"))
    logger.info("[Loader] Loaded %s (%d historical records)", Path(path).name, len(old_data))
    return old_data


def load_projection_file(path: str | Path) -> ProjectionPayload:
    payload = parse_projection_payload(_read(path, "projections.json"))
    logger.info("[Loader] Loaded %s (%d timeframe keys)",
                Path(path).name, len(payload.projections_data))
    return payload


def load_chart_sources(
    data_path: str | Path | None = None,
    projections_path: str | Path | None = None,
) -> ChartSources:
    """Load either or both files; a missing path leaves that side empty."""
    sources = ChartSources()
    if data_path is not None:
        sources.old_data = load_historical_file(data_path)
    if projections_path is not None:
        payload = load_projection_file(projections_path)
        sources.projections_data = payload.projections_data
        sources.goal_based_projections = payload.goal_based_projections
    return sources
