"""
Acceptance tests — period labels

Rules:
  - quarter = (month - 1) // 3 + 1, year = first four digits.
  - Ordering is a strict total order within one frequency.
  - Malformed labels raise ParseError instead of sorting silently.
"""

import itertools

import pytest

from projviz.errors import ParseError
from projviz.normalizers.periods import (
    bucket_label,
    compare_labels,
    label_sort_key,
    to_quarter_label,
    to_year_label,
)


# ---------------------------------------------------------------------------
# Label derivation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("month,expected", [
    ("2023-01", "2023-Q1"),
    ("2023-03", "2023-Q1"),
    ("2023-04", "2023-Q2"),
    ("2023-09", "2023-Q3"),
    ("2023-10", "2023-Q4"),
    ("2023-12", "2023-Q4"),
])
def test_to_quarter_label(month, expected):
    assert to_quarter_label(month) == expected


def test_to_year_label():
    assert to_year_label("2019-07") == "2019"


def test_bucket_label_monthly_passes_through():
    assert bucket_label("2024-02", "monthly") == "2024-02"
    assert bucket_label("2024-02", "quarterly") == "2024-Q1"
    assert bucket_label("2024-02", "annual") == "2024"


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def test_monthly_compares_numerically_not_lexically():
    assert compare_labels("2023-02", "2023-11", "monthly") == -1
    assert compare_labels("2024-01", "2023-12", "monthly") == 1
    assert compare_labels("2023-05", "2023-05", "monthly") == 0


def test_quarterly_and_annual_ordering():
    assert compare_labels("2023-Q4", "2024-Q1", "quarterly") == -1
    assert compare_labels("2024-Q3", "2024-Q2", "quarterly") == 1
    assert compare_labels("2030", "2029", "annual") == 1


_SAMPLES = {
    "monthly": ["2022-12", "2023-01", "2023-02", "2023-10", "2024-01"],
    "quarterly": ["2022-Q4", "2023-Q1", "2023-Q3", "2024-Q2"],
    "annual": ["1999", "2023", "2024", "2031"],
}


@pytest.mark.parametrize("freq", sorted(_SAMPLES))
def test_ordering_is_antisymmetric_and_transitive(freq):
    labels = _SAMPLES[freq]
    for a, b in itertools.product(labels, repeat=2):
        assert compare_labels(a, b, freq) == -compare_labels(b, a, freq)
    for a, b, c in itertools.permutations(labels, 3):
        if compare_labels(a, b, freq) < 0 and compare_labels(b, c, freq) < 0:
            assert compare_labels(a, c, freq) < 0


def test_sort_key_matches_comparator():
    shuffled = ["2023-10", "2023-02", "2024-01", "2022-12"]
    assert sorted(shuffled, key=lambda l: label_sort_key(l, "monthly")) == [
        "2022-12", "2023-02", "2023-10", "2024-01",
    ]


# ---------------------------------------------------------------------------
# Malformed labels
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("label,freq", [
    ("2023-13", "monthly"),
    ("2023/01", "monthly"),
    ("", "monthly"),
    ("2023-Q5", "quarterly"),
    ("2023-01", "quarterly"),
    ("FY2023", "annual"),
])
def test_malformed_labels_raise_parse_error(label, freq):
    with pytest.raises(ParseError):
        label_sort_key(label, freq)


def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        to_quarter_label("not-a-month")
