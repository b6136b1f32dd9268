"""
Tests unitarios para las utilidades de fechas.
"""
from datetime import datetime, timezone

import pytest

from tablebridge.shared.utils.datetime_utils import parse_iso_timestamp, to_naive_utc


@pytest.mark.parametrize(
    "raw, micro",
    [
        ("2024-03-01T10:00:00.1+00:00", 100000),
        ("2024-03-01T10:00:00.12345+00:00", 123450),
        ("2024-03-01T10:00:00.123456+00:00", 123456),
        ("2024-03-01T10:00:00.1234567Z", 123456),
        ("2024-03-01 10:00:00.5", 500000),
    ],
)
def test_parses_postgrest_fractional_seconds(raw, micro):
    parsed = parse_iso_timestamp(raw)

    assert parsed == datetime(2024, 3, 1, 10, 0, 0, micro, tzinfo=timezone.utc)


def test_offset_is_normalized_to_naive_utc():
    parsed = parse_iso_timestamp("2024-03-01T12:30:00.25-03:00")

    assert to_naive_utc(parsed) == datetime(2024, 3, 1, 15, 30, 0, 250000)


@pytest.mark.parametrize("raw", ["not a date", "3.14", ""])
def test_non_iso_strings_return_none(raw):
    assert parse_iso_timestamp(raw) is None
