import logging
import math

import pytest

from spacehog.utils import (DAY, HOUR, MONTH, Duration, format_bytes, newer_bound,
                            older_bound, parse_duration)

NOW = 1_700_000_000.0


@pytest.mark.parametrize("text,expected", [
    ("20m", Duration(20, "m")),
    ("3d", Duration(3, "d")),
    ("12h", Duration(12, "h")),
    (" 7d ", Duration(7, "d")),
    ("3days", Duration(3, "d")),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", None, "d3", "3", "3w", "-2d", "abc"])
def test_parse_duration_invalid(text):
    assert parse_duration(text) is None


def test_month_is_thirty_days():
    assert Duration(1, "m").seconds == 30 * DAY == MONTH
    assert Duration(2, "h").seconds == 2 * HOUR


def test_bounds():
    assert newer_bound("2d", NOW) == NOW - 2 * DAY
    assert older_bound("1m", NOW) == NOW - MONTH


def test_missing_bounds_do_not_filter():
    assert newer_bound(None, NOW) == 0
    assert older_bound(None, NOW) == math.inf


def test_invalid_bounds_warn_and_fall_back(caplog):
    with caplog.at_level(logging.WARNING):
        assert newer_bound("soon", NOW) == 0
        assert older_bound("later", NOW) == math.inf
    assert "Invalid --newer" in caplog.text
    assert "Invalid --older" in caplog.text


@pytest.mark.parametrize("num,expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1024, "1.00 KB"),
    (1536, "1.50 KB"),
    (3 * 1024 ** 2, "3.00 MB"),
    (5 * 1024 ** 3, "5.00 GB"),
    (2 * 1024 ** 4, "2.00 TB"),
])
def test_format_bytes(num, expected):
    assert format_bytes(num) == expected
