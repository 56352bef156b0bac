"""Inference Request Builder: the fixed two-message prompt for one generation.

Invariants:
    - Pure: same descriptor + form input always yields an equal request
    - The user prompt embeds render_shape(descriptor), the same descriptor
      the validator walks
    - Temperature and token budget come from the descriptor, never random
"""

from dataclasses import dataclass
from typing import Any, Mapping

from insight.core.shape import DomainDescriptor, render_shape


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable request handed to the generation client."""
    model: str
    system_prompt: str
    user_prompt: str
    temperature: float
    max_output_tokens: int

    @property
    def messages(self) -> list[dict]:
        """Provider-neutral two-message form (system + user)."""
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]


def format_input_value(value: Any) -> str:
    """Render one form value the way the dashboard forms display it."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_user_prompt(descriptor: DomainDescriptor, form_input: Mapping[str, Any]) -> str:
    lines = [f"{descriptor.task}:"]
    for field in descriptor.inputs:
        lines.append(f"{field.label}: {format_input_value(form_input.get(field.key, ''))}")
    lines.append("")
    lines.append("Return the analysis in this exact JSON format:")
    lines.append(render_shape(descriptor))
    if descriptor.closing_note:
        lines.append("")
        lines.append(descriptor.closing_note)
    return "\n".join(lines)


def build_generation_request(
    descriptor: DomainDescriptor, form_input: Mapping[str, Any],
) -> GenerationRequest:
    """Compose the request for one submit. Pure, no IO."""
    return GenerationRequest(
        model=descriptor.model,
        system_prompt=descriptor.system_prompt,
        user_prompt=build_user_prompt(descriptor, form_input),
        temperature=descriptor.temperature,
        max_output_tokens=descriptor.max_output_tokens,
    )
