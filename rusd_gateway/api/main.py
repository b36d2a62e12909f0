"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rusd_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rusd_gateway.api.v1 import actions, balances, session
from rusd_gateway.infrastructure.observability.logging import setup_logging
from rusd_gateway.config import settings
from rusd_gateway.services.orchestrator import Orchestrator

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Periodic refresh must not outlive the app
    orchestrator = getattr(app.state, "orchestrator", None)
    if orchestrator is not None:
        await orchestrator.close()


def create_app(orchestrator: Orchestrator | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="rUSD Gateway",
        description="Approve, mint, and burn a collateral-backed rebasing token",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "network": settings.network.value,
            "missing_config": settings.missing_values(),
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(session.router, prefix="/v1", tags=["session"])
    app.include_router(balances.router, prefix="/v1", tags=["balances"])
    app.include_router(actions.router, prefix="/v1", tags=["actions"])

    return app


app = create_app()
