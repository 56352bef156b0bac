"""Schema Validator: parse the raw completion and walk it against the domain shape.

Invariants:
    - All-or-nothing: returns Ok(payload) with every declared field, or Err,
      never a partially populated payload
    - Err(ParseError) when the text is not a JSON object
    - Err(SchemaError) names the first offending field by dotted path
      (analysis.segments[1].growth)
    - Undeclared keys are dropped; TIMESTAMP strings become aware datetimes
    - Pure: the raw text and descriptor are never mutated

Design Decisions:
    - Tagged result over raise/catch: a malformed reply is an expected
      outcome of calling a model, not an exceptional one
    - Single ```json fence stripped before parsing: models wrap JSON in
      markdown often enough that refusing it only costs a retry
    - bool rejected as a number (Python's bool is an int subclass) and
      NaN/Infinity rejected (json.loads accepts them), as are integers too
      large for a float
    - ValueError from json.loads caught whole: the int digit limit raises a
      plain ValueError, not JSONDecodeError
"""

import json
import math
import re
from datetime import datetime, timezone
from typing import Any

from insight.core.domain_types import FieldKind
from insight.core.errors import ParseError, SchemaError
from insight.core.result import Err, Ok
from insight.core.shape import DomainDescriptor, FieldSpec, top_level_fields

_FENCE = re.compile(r"^```(?:json)?\s*\n(.*)\n\s*```$", re.DOTALL | re.IGNORECASE)


class _Violation(Exception):
    """Internal short-circuit for the recursive walk; never leaves this module."""

    def __init__(self, path: str, reason: str):
        super().__init__(path)
        self.path = path
        self.reason = reason


def parse_completion(raw: str) -> Ok[dict] | Err[ParseError]:
    """Parse raw completion text into a JSON object."""
    if not isinstance(raw, str) or not raw.strip():
        return Err(ParseError("empty completion"))
    text = raw.strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group(1).strip()
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return Err(ParseError(f"invalid JSON ({e.__class__.__name__})"))
    if not isinstance(data, dict):
        return Err(ParseError(f"expected a JSON object, got {type(data).__name__}"))
    return Ok(data)


def validate_payload(
    raw: str, descriptor: DomainDescriptor,
) -> Ok[dict] | Err[ParseError | SchemaError]:
    """Parse then validate a completion; Ok payload has analysis, extras, recommendations."""
    parsed = parse_completion(raw)
    if isinstance(parsed, Err):
        return parsed
    try:
        return Ok(_check_reply(parsed.value, descriptor))
    except _Violation as v:
        return Err(SchemaError(v.path, v.reason))


def _check_reply(data: dict, descriptor: DomainDescriptor) -> dict:
    analysis = data.get("analysis")
    if "analysis" not in data:
        raise _Violation("analysis", "is missing")
    if not isinstance(analysis, dict):
        raise _Violation("analysis", "must be an object")
    payload = {"analysis": _check_object(analysis, descriptor.analysis, "analysis")}
    payload.update(_check_object(data, top_level_fields(descriptor), ""))
    return payload


def _check_object(obj: dict, fields: tuple[FieldSpec, ...], prefix: str) -> dict:
    out = {}
    for spec in fields:
        path = f"{prefix}.{spec.name}" if prefix else spec.name
        if spec.name not in obj:
            raise _Violation(path, "is missing")
        out[spec.name] = _check_value(obj[spec.name], spec, path)
    return out


def _check_value(value: Any, spec: FieldSpec, path: str) -> Any:
    kind = spec.kind
    if kind is FieldKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _Violation(path, "must be a number")
        try:
            finite = math.isfinite(float(value))
        except OverflowError:
            finite = False
        if not finite:
            raise _Violation(path, "must be a finite number")
        return value
    if kind is FieldKind.STRING:
        if not isinstance(value, str):
            raise _Violation(path, "must be a string")
        return value
    if kind is FieldKind.ENUM:
        if value not in spec.choices:
            allowed = ", ".join(spec.choices)
            raise _Violation(path, f"must be one of: {allowed}")
        return value
    if kind is FieldKind.TIMESTAMP:
        return _check_timestamp(value, path)
    if not isinstance(value, list):
        raise _Violation(path, "must be an array")
    if len(value) < spec.min_items:
        raise _Violation(path, f"must contain at least {spec.min_items} item(s)")
    if kind is FieldKind.STRING_LIST:
        for i, item in enumerate(value):
            if not isinstance(item, str):
                raise _Violation(f"{path}[{i}]", "must be a string")
        return list(value)
    items = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise _Violation(f"{path}[{i}]", "must be an object")
        items.append(_check_object(item, spec.fields, f"{path}[{i}]"))
    return items


def _check_timestamp(value: Any, path: str) -> datetime:
    if not isinstance(value, str):
        raise _Violation(path, "must be an ISO-8601 date string")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise _Violation(path, "must be an ISO-8601 date string")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
