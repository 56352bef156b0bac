"""Range Normalizer: clamp and round numeric fields into their declared ranges.

Invariants:
    - Total: never fails on a payload that passed validate_payload
    - Pure: returns a new payload, input untouched
    - Idempotent: normalize(normalize(x)) == normalize(x)
    - Integral fields come out as int, rounded half-up (87.5 -> 88)

Design Decisions:
    - Half-up over Python's round(): round() is banker's rounding (86.5 -> 86),
      which users read as a bug on a 1-100 gauge
    - Clamp before rounding: with integer bounds the result stays in range
"""

import math

from insight.core.domain_types import FieldKind
from insight.core.shape import DomainDescriptor, FieldSpec, top_level_fields


def clamp(value: float, minimum: float | None, maximum: float | None) -> float:
    if minimum is not None and value < minimum:
        value = minimum
    if maximum is not None and value > maximum:
        value = maximum
    return value


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_number(value: float, spec: FieldSpec) -> float | int:
    value = clamp(value, spec.minimum, spec.maximum)
    if spec.integral:
        return round_half_up(value)
    return value


def normalize_payload(payload: dict, descriptor: DomainDescriptor) -> dict:
    """Return a copy of a validated payload with every ranged number normalized."""
    result = _normalize_object(payload, top_level_fields(descriptor))
    # top-level pass copies the raw analysis; replace it last
    result["analysis"] = _normalize_object(payload["analysis"], descriptor.analysis)
    return result


def _normalize_object(obj: dict, fields: tuple[FieldSpec, ...]) -> dict:
    out = dict(obj)
    for spec in fields:
        if spec.name not in obj:
            continue
        value = obj[spec.name]
        if spec.kind is FieldKind.NUMBER and (spec.has_range or spec.integral):
            out[spec.name] = normalize_number(value, spec)
        elif spec.kind is FieldKind.OBJECT_LIST:
            out[spec.name] = [_normalize_object(item, spec.fields) for item in value]
        elif spec.kind is FieldKind.STRING_LIST:
            out[spec.name] = list(value)
    return out
