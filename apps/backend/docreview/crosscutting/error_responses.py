# apps/backend/docreview/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas de error estándar (RFC 7807 / Problem Details)
===============================================================================

Objetivo
--------
Uniformar TODOS los errores HTTP para que:
- El frontend pueda manejar por "code"
- El backend pueda correlacionar por request_id / error_id
- El mensaje del proveedor (en chino, visible al usuario) viaje en `detail`

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + handler

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir payload RFC7807 (ErrorDetail)
  - Proveer factories de errores frecuentes (incluye fallas del proveedor)

Colaboradores:
  - crosscutting/middleware.py (request_id, 413)
  - interfaces/api/http/error_mapping.py (ReviewFailure -> HTTP)
  - api/exception_handlers.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    RATE_LIMITED = "RATE_LIMITED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    LLM_ERROR = "LLM_ERROR"
    LLM_TIMEOUT = "LLM_TIMEOUT"


class ErrorDetail(BaseModel):
    """
    Modelo RFC 7807 (Problem Details).

    Campos extra:
    - code: error code estable para clientes
    - errors: lista opcional de detalles (ej: [{"field":"x","msg":"..."}])
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_OPENAPI_ERROR_CONTENT = {
    PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}


def _openapi_error(description: str) -> dict[str, Any]:
    return {
        "description": f"{description} (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    }


OPENAPI_ERROR_RESPONSES = {
    "401": _openapi_error("Provider rejected the API key"),
    "402": _openapi_error("Provider account out of credit"),
    "413": _openapi_error("Payload Too Large"),
    "422": _openapi_error("Validation Error"),
    "429": _openapi_error("Provider rate limit"),
    "502": _openapi_error("Provider failure"),
    "504": _openapi_error("Provider timeout"),
    "default": _openapi_error("Error"),
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      AppHTTPException

    Responsabilidades:
      - Adjuntar un ErrorCode estable
      - Transportar detalles (errors[])
      - Permitir headers custom (Retry-After)
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


def unauthorized(detail: str) -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def payment_required(detail: str) -> AppHTTPException:
    return AppHTTPException(402, ErrorCode.PAYMENT_REQUIRED, detail)


def rate_limited(detail: str, retry_after: int = 30) -> AppHTTPException:
    exc = AppHTTPException(429, ErrorCode.RATE_LIMITED, detail)
    exc.headers = {"Retry-After": str(retry_after)}
    return exc


def llm_timeout(detail: str) -> AppHTTPException:
    return AppHTTPException(504, ErrorCode.LLM_TIMEOUT, detail)


def llm_error(detail: str) -> AppHTTPException:
    return AppHTTPException(502, ErrorCode.LLM_ERROR, detail)


def internal_error(detail: str = "Ocurrió un error inesperado") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


# ---------------------------------------------------------------------------
# Handler FastAPI
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """
    Handler para AppHTTPException.

    Incluye instance (URL) y propaga headers opcionales (Retry-After, etc.).
    """
    request_id = getattr(getattr(request, "state", None), "request_id", None)

    errors = exc.errors or []
    if request_id:
        errors = [*errors, {"request_id": request_id}]

    error = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
