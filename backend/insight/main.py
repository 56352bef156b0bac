"""Insight API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InsightError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every store hydrated from the database before the first request

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Stores, client and feed built in the lifespan and kept on app.state:
      one registry per app instance, replaceable in tests
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insight.api.error_handlers import register_error_handlers
from insight.api.routes import domain_stores, health
from insight.config import get_settings
from insight.infrastructure.anthropic_client import AnthropicGenerationClient
from insight.infrastructure.database import init_db
from insight.infrastructure.key_value_storage import SqlKeyValueStorage
from insight.infrastructure.observability import setup_logging
from insight.services.domain_registry import all_descriptors
from insight.services.notifications import NotificationFeed
from insight.services.store_registry import StoreRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await db.create_schema()

    client = AnthropicGenerationClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.generation_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    registry = StoreRegistry(
        all_descriptors(model=settings.generation_model),
        client,
        SqlKeyValueStorage(db),
        NotificationFeed(maxlen=settings.notification_buffer),
        policy=settings.submit_policy,
    )
    await registry.hydrate_all()
    app.state.registry = registry
    logger.info("Insight API started")
    yield
    logger.info("Insight API shutting down")
    await db.dispose()


app = FastAPI(title="Insight API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(domain_stores.router)

register_error_handlers(app)
