"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.middleware import RequestContextMiddleware
from app.api.routes import api_router
from app.core.exceptions import NotificationServiceError, service_error_handler
from app.domain.services.notification_processor import NotificationProcessor
from app.domain.templates.resolver import TemplateResolver
from app.infrastructure.channels.factory import build_default_senders
from app.logging_config import setup_logging
from app.persistence.database import AsyncSessionLocal, engine
from app.settings import settings

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    processor = NotificationProcessor(
        session_factory=AsyncSessionLocal,
        senders=build_default_senders(settings),
        resolver=TemplateResolver(settings.company_name),
    )
    app.state.notification_processor = processor
    if settings.notification_autostart:
        processor.start(settings.notification_poll_interval_ms)
    yield
    # Shutdown
    await processor.shutdown()
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="KnotSync Notification Service",
    description="Multi-channel notification delivery for the KnotSync CRM",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(NotificationServiceError, service_error_handler)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
