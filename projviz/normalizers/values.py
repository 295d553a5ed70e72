import math
from typing import Any

from projviz.models import METRIC_KEYS


def is_num(v: Any) -> bool:
    """True for finite int/float values; bools are not numbers here."""
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def num_or_null(v: Any) -> float | None:
    """Return float if v is a valid finite number, else None."""
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def metric_values(record: dict[str, Any]) -> dict[str, float | None]:
    """Pick every metric from record; absent or non-numeric becomes None."""
    return {k: num_or_null(record.get(k)) for k in METRIC_KEYS}
