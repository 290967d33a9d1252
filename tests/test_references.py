from datetime import datetime, timezone

import pytest

from warehouse.core.errors import ConflictError
from warehouse.core.references import barcode_aliases, generate_reference_number, normalize_code
from warehouse.core.timestamps import parse_timestamp


def test_reference_number_format():
    now = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
    reference = generate_reference_number("outbound", now=now)
    prefix, stamp, suffix = reference.split("-")
    assert prefix == "OUTBOUND"
    assert stamp == "20240131"
    assert len(suffix) == 6 and suffix == suffix.upper()


def test_reference_number_redraws_taken_candidates():
    seen = []

    def exists(candidate):
        seen.append(candidate)
        return len(seen) < 3

    reference = generate_reference_number("inbound", exists=exists)
    assert reference == seen[-1]
    assert len(seen) == 3


def test_reference_number_gives_up_with_conflict():
    with pytest.raises(ConflictError, match="please retry"):
        generate_reference_number("inbound", exists=lambda candidate: True)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("036000291452", ["036000291452", "0036000291452"]),
        ("0036000291452", ["0036000291452", "036000291452"]),
        (" 4006381-333931 ", ["4006381-333931", "4006381333931"]),
        ("abc 123", ["abc 123"]),
        ("   ", []),
    ],
)
def test_barcode_aliases(raw, expected):
    assert barcode_aliases(raw) == expected


def test_normalize_code():
    assert normalize_code(" mw01 ") == "MW01"
    assert normalize_code("  ") is None


def test_parse_timestamp_variants():
    assert parse_timestamp("2024-05-01") == "2024-05-01T00:00:00Z"
    assert parse_timestamp("2024-05-01", end_of_day=True) == "2024-05-01T23:59:59Z"
    assert parse_timestamp("2024-05-01T10:30:00+02:00") == "2024-05-01T08:30:00Z"
    assert parse_timestamp(None) is None
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")
