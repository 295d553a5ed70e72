"""
Period label helpers.

Label formats:
  monthly    "YYYY-MM"
  quarterly  "YYYY-Qn"   n = (month - 1) // 3 + 1
  annual     "YYYY"

Labels are ordered by (year, sub-period) within one frequency. Labels of
different frequencies are never compared. Malformed labels raise ParseError
instead of producing a silently wrong order.
"""

import re

from projviz.errors import ParseError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_QUARTER_RE = re.compile(r"^(\d{4})-Q([1-4])$")
_YEAR_RE = re.compile(r"^(\d{4})$")


def parse_month(label: str) -> tuple[int, int]:
    """Return (year, month) for "YYYY-MM"."""
    m = _MONTH_RE.match(str(label).strip())
    if not m:
        raise ParseError(f"invalid month label: {label!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ParseError(f"month out of range in {label!r}")
    return year, month


def parse_quarter(label: str) -> tuple[int, int]:
    m = _QUARTER_RE.match(str(label).strip())
    if not m:
        raise ParseError(f"invalid quarter label: {label!r}")
    return int(m.group(1)), int(m.group(2))


def parse_year(label: str | int) -> tuple[int]:
    m = _YEAR_RE.match(str(label).strip())
    if not m:
        raise ParseError(f"invalid year label: {label!r}")
    return (int(m.group(1)),)


_PARSERS = {
    "monthly": parse_month,
    "quarterly": parse_quarter,
    "annual": parse_year,
}


def parse_label(label: str, freq: str) -> tuple[int, ...]:
    parser = _PARSERS.get(freq)
    if parser is None:
        raise ParseError(f"unknown frequency: {freq!r}")
    return parser(label)


def label_sort_key(label: str, freq: str) -> tuple[int, ...]:
    """Numeric sort key for label under freq."""
    return parse_label(label, freq)


def to_quarter_label(month_label: str) -> str:
    year, month = parse_month(month_label)
    return f"{year}-Q{(month - 1) // 3 + 1}"


def to_year_label(month_label: str) -> str:
    year, _ = parse_month(month_label)
    return str(year)


def bucket_label(month_label: str, freq: str) -> str:
    """Label of the freq bucket a monthly label falls into."""
    if freq == "quarterly":
        return to_quarter_label(month_label)
    if freq == "annual":
        return to_year_label(month_label)
    parse_month(month_label)
    return str(month_label).strip()


def compare_labels(a: str, b: str, freq: str) -> int:
    """Return -1, 0 or 1 comparing a and b within freq."""
    ka, kb = parse_label(a, freq), parse_label(b, freq)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0
