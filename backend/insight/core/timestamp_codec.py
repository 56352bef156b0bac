"""Timestamp Codec: aware datetimes to/from wire-safe ISO-8601 strings.

Invariants:
    - encode always emits UTC with microseconds: fixed width, so strings sort
      in instant order
    - decode(encode(t)) == t for every aware datetime
    - Naive datetimes are rejected (no implicit local zone)
"""

from datetime import datetime, timezone


def encode_timestamp(value: datetime) -> str:
    """Encode an aware datetime as a UTC ISO-8601 instant."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("cannot encode naive datetime; attach a timezone first")
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def decode_timestamp(text: str) -> datetime:
    """Decode an ISO-8601 instant back to an aware UTC datetime."""
    if not isinstance(text, str):
        raise ValueError(f"timestamp must be a string, got {type(text).__name__}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp '{text}' has no UTC offset")
    return parsed.astimezone(timezone.utc)
