"""Domain Stores: the dashboard's view of every generation store.

Invariants:
    - Form bodies validated by the descriptor's Pydantic model before submit
    - Failed generation → error envelope with the failure's status
      (502 transport, 422 parse/schema); the store keeps its error and draft
    - DELETE of an absent entity id is 204 (no-op), never 404
    - Unknown domain → 404 via ResourceNotFoundError

Design Decisions:
    - Stores live on app.state.registry (built in the lifespan), injected via Depends
    - Routes stay thin: pipeline, persistence and notifications live in the store
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from insight.schemas.domain_store import (
    DomainSummary, EntityResponse, NotificationResponse, StoreStateResponse,
    failure_response, form_model_for,
)
from insight.services.generation_store import GenerationStore
from insight.services.store_registry import StoreRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["domains"])


def get_registry(request: Request) -> StoreRegistry:
    return request.app.state.registry


def get_store(
    name: str, registry: StoreRegistry = Depends(get_registry),
) -> GenerationStore:
    return registry.get(name)


@router.get("/domains", response_model=list[DomainSummary])
async def list_domains(registry: StoreRegistry = Depends(get_registry)):
    """Every registered domain with its form inputs."""
    return [DomainSummary.from_descriptor(s.descriptor) for s in registry]


@router.get("/domains/{name}", response_model=StoreStateResponse)
async def get_domain_state(store: GenerationStore = Depends(get_store)):
    """Current store state: entities (newest first), loading, error, draft."""
    return StoreStateResponse.from_state(store.name, store.state())


@router.post(
    "/domains/{name}/entities",
    response_model=EntityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_form(
    body: dict[str, Any] = Body(...),
    store: GenerationStore = Depends(get_store),
):
    """Run one generation for the submitted form."""
    try:
        form = form_model_for(store.descriptor).model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(), body=body) from e

    entity = await store.submit(form.model_dump())
    if entity is None:
        failure = store.last_failure
        return JSONResponse(
            status_code=failure.http_status, content=failure_response(failure),
        )
    return EntityResponse.from_entity(entity)


@router.delete(
    "/domains/{name}/entities/{entity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_entity(
    entity_id: str, store: GenerationStore = Depends(get_store),
):
    """Remove an entity by id; absent ids are a no-op."""
    await store.remove(entity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/domains/{name}/error", status_code=status.HTTP_204_NO_CONTENT)
async def clear_error(store: GenerationStore = Depends(get_store)):
    store.clear_error()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/notifications", response_model=list[NotificationResponse])
async def drain_notifications(registry: StoreRegistry = Depends(get_registry)):
    """Pending notifications, oldest first. Each is returned once."""
    return [
        NotificationResponse.from_notification(n)
        for n in registry.feed.drain()
    ]
