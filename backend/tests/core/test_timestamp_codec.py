"""Timestamp Codec: tests for encode/decode of aware datetimes.

Invariants:
    - decode(encode(t)) == t for aware datetimes in any zone
    - Encoded strings are UTC, fixed width, and sort in instant order
    - Naive datetimes and offset-less strings are rejected
"""

from datetime import datetime, timedelta, timezone

import pytest

from insight.core.timestamp_codec import decode_timestamp, encode_timestamp


def test_roundtrip_utc():
    t = datetime(2025, 3, 14, 9, 26, 53, 589793, tzinfo=timezone.utc)
    assert decode_timestamp(encode_timestamp(t)) == t


def test_roundtrip_other_zone_keeps_instant():
    """A +05:30 datetime decodes to the same instant, expressed in UTC."""
    ist = timezone(timedelta(hours=5, minutes=30))
    t = datetime(2025, 1, 1, 12, 0, tzinfo=ist)
    decoded = decode_timestamp(encode_timestamp(t))
    assert decoded == t
    assert decoded.utcoffset() == timedelta(0)


def test_encode_is_utc_with_microseconds():
    t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert encode_timestamp(t) == "2025-01-01T00:00:00.000000+00:00"


def test_encoded_strings_sort_in_instant_order():
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    times = [base + timedelta(microseconds=n * 999_999) for n in range(5)]
    encoded = [encode_timestamp(t) for t in times]
    assert sorted(encoded) == encoded


def test_encode_rejects_naive():
    with pytest.raises(ValueError):
        encode_timestamp(datetime(2025, 1, 1))


def test_decode_accepts_z_suffix():
    assert decode_timestamp("2025-01-01T10:00:00Z") == datetime(
        2025, 1, 1, 10, tzinfo=timezone.utc,
    )


def test_decode_rejects_missing_offset():
    with pytest.raises(ValueError):
        decode_timestamp("2025-01-01T10:00:00")


def test_decode_rejects_non_string():
    with pytest.raises(ValueError):
        decode_timestamp(1735725600)
