"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (review / rules).

Colaboradores:
  - crosscutting.error_responses.OPENAPI_ERROR_RESPONSES
  - routers.* (sub-routers por feature)

Notas:
  - Este router se incluye desde docreview/api/main.py con prefix="/v1".
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.review import router as review_router
from .routers.rules import router as rules_router


def build_router() -> APIRouter:
    """Construye el router raíz v1 (sin side effects al importar los sub-routers)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(review_router)
    api_router.include_router(rules_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
