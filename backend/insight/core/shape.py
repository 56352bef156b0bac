"""Shape Descriptor: the declarative contract a domain's reply must satisfy.

Invariants:
    - One DomainDescriptor per domain is the single source for BOTH the JSON
      shape text embedded in the prompt and the validator/normalizer walk
    - Reply layout is always {"analysis": {...}, <extras>..., "recommendations": [...]};
      extras are declared top-level fields (e.g. market competitors)
    - Descriptors are frozen; per-deployment overrides go through dataclasses.replace()

Design Decisions:
    - Plain frozen dataclasses over JSON Schema: the prompt needs the compact
      "<number between 1-100>" notation the models follow best
    - render_shape lives beside the types so the prompt and the validator
      cannot read different field lists
"""

from dataclasses import dataclass

from insight.core.domain_types import FieldKind, InputKind

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_TEMPERATURE = 0.7
_INDENT = "  "


@dataclass(frozen=True)
class FieldSpec:
    """One declared field of a reply object."""
    name: str
    kind: FieldKind
    hint: str = ""
    choices: tuple[str, ...] = ()
    minimum: float | None = None
    maximum: float | None = None
    integral: bool = False
    fields: tuple["FieldSpec", ...] = ()
    min_items: int = 0

    @property
    def has_range(self) -> bool:
        return self.minimum is not None or self.maximum is not None


@dataclass(frozen=True)
class InputField:
    """One form input, rendered into the prompt as 'Label: value'."""
    key: str
    label: str
    kind: InputKind = InputKind.TEXT


@dataclass(frozen=True)
class DomainDescriptor:
    """Everything that varies between the dashboard's generation features."""
    name: str
    title: str
    storage_key: str
    system_prompt: str
    task: str
    inputs: tuple[InputField, ...]
    analysis: tuple[FieldSpec, ...]
    extras: tuple[FieldSpec, ...] = ()
    recommendations_hint: str = "array of strings with actionable recommendations"
    closing_note: str = ""
    success_message: str = ""
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = 1000

    @property
    def input_keys(self) -> tuple[str, ...]:
        return tuple(f.key for f in self.inputs)


# ─── Field constructors ──────────────────────────────────────────
# Descriptor modules read as text("timeEstimate", ...) rather than
# FieldSpec("timeEstimate", FieldKind.STRING, hint=...).

def text(name: str, hint: str = "") -> FieldSpec:
    return FieldSpec(name, FieldKind.STRING, hint=hint)


def number(
    name: str, hint: str = "", *, minimum: float | None = None,
    maximum: float | None = None, integral: bool = False,
) -> FieldSpec:
    return FieldSpec(
        name, FieldKind.NUMBER, hint=hint,
        minimum=minimum, maximum=maximum, integral=integral,
    )


def score(name: str, low: int = 1, high: int = 100) -> FieldSpec:
    """Integral score clamped to [low, high]: the dashboard's 1-100 gauges."""
    return number(
        name, f"number between {low}-{high}",
        minimum=low, maximum=high, integral=True,
    )


def choice(name: str, *choices: str) -> FieldSpec:
    return FieldSpec(name, FieldKind.ENUM, choices=tuple(choices))


def strings(name: str, hint: str = "", min_items: int = 0) -> FieldSpec:
    return FieldSpec(name, FieldKind.STRING_LIST, hint=hint, min_items=min_items)


def objects(name: str, *fields: FieldSpec) -> FieldSpec:
    return FieldSpec(name, FieldKind.OBJECT_LIST, fields=tuple(fields))


def timestamp(name: str, hint: str = "") -> FieldSpec:
    return FieldSpec(name, FieldKind.TIMESTAMP, hint=hint)


def top_level_fields(descriptor: DomainDescriptor) -> tuple[FieldSpec, ...]:
    """Reply fields outside "analysis": extras, then recommendations."""
    return descriptor.extras + (
        strings("recommendations", descriptor.recommendations_hint),
    )


# ─── Prompt shape rendering ─────────────────────────────────────

_DEFAULT_PLACEHOLDER = {
    FieldKind.STRING: "string",
    FieldKind.NUMBER: "number",
    FieldKind.STRING_LIST: "array of strings",
    FieldKind.TIMESTAMP: "YYYY-MM-DD",
}


def _placeholder(spec: FieldSpec) -> str:
    """Angle-bracket placeholder; a hint, when set, is the whole text."""
    if spec.kind is FieldKind.ENUM:
        return "<" + " | ".join(f'"{c}"' for c in spec.choices) + ">"
    return f"<{spec.hint or _DEFAULT_PLACEHOLDER[spec.kind]}>"


def _render_fields(fields: tuple[FieldSpec, ...], depth: int) -> list[str]:
    pad = _INDENT * depth
    lines = []
    for i, spec in enumerate(fields):
        comma = "," if i < len(fields) - 1 else ""
        if spec.kind is FieldKind.OBJECT_LIST:
            lines.append(f'{pad}"{spec.name}": [')
            lines.append(f"{pad}{_INDENT}{{")
            lines.extend(_render_fields(spec.fields, depth + 2))
            lines.append(f"{pad}{_INDENT}}}")
            lines.append(f"{pad}]{comma}")
        else:
            lines.append(f'{pad}"{spec.name}": {_placeholder(spec)}{comma}')
    return lines


def render_shape(descriptor: DomainDescriptor) -> str:
    """Render the exact JSON shape the validator will enforce."""
    lines = ["{", f'{_INDENT}"analysis": {{']
    lines.extend(_render_fields(descriptor.analysis, 2))
    lines.append(f"{_INDENT}}},")
    lines.extend(_render_fields(top_level_fields(descriptor), 1))
    lines.append("}")
    return "\n".join(lines)
