"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from westgate_analytics.api.middleware import RequestIDMiddleware, MetricsMiddleware
from westgate_analytics.api.v1 import dashboard, matrix, thresholds
from westgate_analytics.infrastructure.database.models import Base
from westgate_analytics.infrastructure.database.session import engine
from westgate_analytics.infrastructure.observability.logging import setup_logging
from westgate_analytics.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Westgate Lending Analytics",
        description="Acceptance statistics and threshold simulation over loan decisions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "data_source": settings.data_source}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(matrix.router, prefix="/v1", tags=["threshold-matrix"])
    app.include_router(thresholds.router, prefix="/v1", tags=["thresholds"])

    return app


app = create_app()
