"""Domain Store Schemas: Pydantic models for the store endpoints.

Invariants:
    - Form bodies are built from the descriptor inputs: every input required,
      text stripped and non-empty, lists non-empty, dates YYYY-MM-DD
    - Unknown form keys are rejected (extra="forbid")
    - Entity responses carry created_at and nested timestamps as ISO-8601

Design Decisions:
    - create_model() per descriptor over one free-form dict: FastAPI reports
      field-level errors through the global RequestValidationError handler
    - Form models cached per descriptor (built once per process)
"""

from datetime import datetime
from functools import lru_cache
from typing import Annotated, Any

from pydantic import (
    AfterValidator, BaseModel, ConfigDict, Field, create_model,
)

from insight.core.domain_types import InputKind
from insight.core.entity_factory import Entity
from insight.core.errors import InsightError
from insight.core.shape import DomainDescriptor
from insight.services.generation_store import StoreState
from insight.services.notifications import Notification


def _strip_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


def _strip_items(v: list[str]) -> list[str]:
    items = [item.strip() for item in v if item.strip()]
    if not items:
        raise ValueError("must contain at least one non-empty item")
    return items


_TextInput = Annotated[str, AfterValidator(_strip_non_empty)]
_ListInput = Annotated[list[str], Field(min_length=1), AfterValidator(_strip_items)]
_DateInput = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]

_INPUT_TYPES: dict[InputKind, Any] = {
    InputKind.TEXT: _TextInput,
    InputKind.NUMBER: float,
    InputKind.INTEGER: int,
    InputKind.LIST: _ListInput,
    InputKind.DATE: _DateInput,
}


class _FormBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


@lru_cache
def _cached_form_model(descriptor: DomainDescriptor) -> type[BaseModel]:
    fields = {
        f.key: (_INPUT_TYPES[f.kind], Field(..., title=f.label))
        for f in descriptor.inputs
    }
    model_name = "".join(p.capitalize() for p in descriptor.name.split("-")) + "Form"
    return create_model(model_name, __base__=_FormBase, **fields)


def form_model_for(descriptor: DomainDescriptor) -> type[BaseModel]:
    """Pydantic model validating one domain's form input."""
    return _cached_form_model(descriptor)


# --- Responses ---------------------------------------------------------------

class InputFieldResponse(BaseModel):
    key: str
    label: str
    kind: InputKind


class DomainSummary(BaseModel):
    """Descriptor summary: what the dashboard needs to render a form."""
    name: str
    title: str
    model: str
    inputs: list[InputFieldResponse]

    @classmethod
    def from_descriptor(cls, d: DomainDescriptor) -> "DomainSummary":
        return cls(
            name=d.name,
            title=d.title,
            model=d.model,
            inputs=[
                InputFieldResponse(key=f.key, label=f.label, kind=f.kind)
                for f in d.inputs
            ],
        )


class EntityResponse(BaseModel):
    id: str
    inputs: dict[str, Any]
    analysis: dict[str, Any]
    recommendations: list[str]
    extras: dict[str, Any] = {}
    created_at: datetime

    @classmethod
    def from_entity(cls, e: Entity) -> "EntityResponse":
        return cls(
            id=e.id,
            inputs=e.inputs,
            analysis=e.analysis,
            recommendations=e.recommendations,
            extras=e.extras,
            created_at=e.created_at,
        )


class StoreStateResponse(BaseModel):
    """Store state as the presentation layer observes it."""
    domain: str
    entities: list[EntityResponse]
    is_loading: bool
    error: str | None
    status: str
    draft: dict[str, Any] | None
    warning: str | None

    @classmethod
    def from_state(cls, domain: str, state: StoreState) -> "StoreStateResponse":
        return cls(
            domain=domain,
            entities=[EntityResponse.from_entity(e) for e in state.entities],
            is_loading=state.is_loading,
            error=state.error,
            status=state.status.value,
            draft=state.draft,
            warning=state.warning,
        )


class NotificationResponse(BaseModel):
    level: str
    message: str
    domain: str
    created_at: datetime

    @classmethod
    def from_notification(cls, n: Notification) -> "NotificationResponse":
        return cls(
            level=n.level.value, message=n.message,
            domain=n.domain, created_at=n.created_at,
        )


def failure_response(error: InsightError) -> dict:
    """Error envelope for a failed generation; names the field on schema errors."""
    body = error.to_response()
    field = getattr(error, "field", None)
    if field is not None:
        body["error"]["field"] = field
    return body
