"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount review/rules routers under /v1 prefix
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - BodyLimitMiddleware: rejects oversized documents before JSON parsing
  - interfaces.api.http.router: review and rules endpoints

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - The provider API key lives on the server (never sent by the client)

Notes:
  - /v1 prefix allows API versioning
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_completion_service
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Logs effective settings and closes provider clients."""
    settings = get_settings()

    logger.info(
        "DocReview API starting up",
        extra={
            "app_env": settings.app_env,
            "llm_provider": settings.effective_provider(),
            "default_model": settings.default_model,
            "max_document_chars": settings.max_document_chars,
            "default_chunk_size": settings.default_chunk_size,
            "max_chunk_concurrency": settings.max_chunk_concurrency,
            "prompt_version": settings.prompt_version,
        },
    )

    try:
        yield
    finally:
        # R: Only close the provider if it was ever built.
        if get_completion_service.cache_info().currsize:
            aclose = getattr(get_completion_service(), "aclose", None)
            if aclose is not None:
                await aclose()
        logger.info("DocReview API shutting down")


# R: Create FastAPI application instance with API metadata
app = FastAPI(
    title="DocReview API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "review",
            "description": "Document review with position-anchored suggestions",
        },
        {
            "name": "rules",
            "description": "Review rule catalog and scene detection",
        },
    ],
)

# R: Middleware order (bottom = first to execute):
# 1. CORSMiddleware - handles preflight
# 2. RequestContextMiddleware - sets request_id
# 3. BodyLimitMiddleware - rejects oversized bodies early
app.add_middleware(BodyLimitMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id"],
    expose_headers=["X-Request-Id"],
)

# R: Register API routes under /v1 prefix for versioning
app.include_router(router, prefix="/v1")

# R: Register exception handlers for structured error responses
register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    R: Liveness check. The service holds no database; it reports the active provider.

    Returns:
        ok: always True once the app is serving
        provider: effective completion provider (openrouter/google/fake)
        request_id: Correlation ID for this request
    """
    settings = get_settings()
    return {
        "ok": True,
        "provider": settings.effective_provider(),
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics():
    """R: Expose Prometheus metrics (text format)."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
