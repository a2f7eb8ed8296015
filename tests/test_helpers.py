"""
Tests for pagination helpers, filter defaults and time stamping.
"""

import re

import pytest

from app.models.movie import MovieFilter
from app.utils.helpers import calculate_skip, calculate_total_pages, contains_pattern, utc_now


@pytest.mark.parametrize("page", [0, -3])
def test_filter_page_defaults_to_one(page):
    assert MovieFilter(page=page).get_page() == 1


@pytest.mark.parametrize("limit", [0, -1])
def test_filter_limit_defaults_to_two(limit):
    assert MovieFilter(limit=limit).get_limit() == 2


def test_filter_keeps_positive_values():
    f = MovieFilter(page=4, limit=25)
    assert (f.get_page(), f.get_limit()) == (4, 25)


@pytest.mark.parametrize(
    "total, per_page, expected",
    [(0, 2, 0), (1, 2, 1), (2, 2, 1), (3, 2, 2), (2, 10, 1), (101, 10, 11)],
)
def test_total_pages_is_ceiling(total, per_page, expected):
    assert calculate_total_pages(total, per_page) == expected


def test_total_pages_rejects_bad_limit():
    with pytest.raises(ValueError):
        calculate_total_pages(5, 0)


def test_calculate_skip():
    assert calculate_skip(1, 2) == 0
    assert calculate_skip(3, 10) == 20
    with pytest.raises(ValueError):
        calculate_skip(0, 10)


def test_contains_pattern_escapes_input():
    cond = contains_pattern("(a+b)")
    assert cond["$options"] == "i"
    assert re.search(cond["$regex"], "x (A+B) y", re.IGNORECASE)
    assert not re.search(cond["$regex"], "aab", re.IGNORECASE)


def test_utc_now_millisecond_precision():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.microsecond % 1000 == 0
