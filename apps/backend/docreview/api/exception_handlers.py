"""
===============================================================================
TARJETA CRC — docreview/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos en errores no controlados.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: ReviewServiceError, ProviderError
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import ProviderError, ProviderErrorKind, ReviewServiceError
from ..crosscutting.logger import logger

_PROVIDER_STATUS: dict[ProviderErrorKind, tuple[int, ErrorCode]] = {
    ProviderErrorKind.TIMEOUT: (504, ErrorCode.LLM_TIMEOUT),
    ProviderErrorKind.UNAUTHORIZED: (401, ErrorCode.UNAUTHORIZED),
    ProviderErrorKind.QUOTA: (402, ErrorCode.PAYMENT_REQUIRED),
    ProviderErrorKind.RATE_LIMITED: (429, ErrorCode.RATE_LIMITED),
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: ReviewServiceError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    """Helper común para errores tipados de servicios."""
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=exc.message,
        errors=[{"error_id": exc.error_id, "request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """ProviderError fuera del fan-out (ej: construcción del adapter sin API key)."""
    status_code, code = _PROVIDER_STATUS.get(exc.kind, (502, ErrorCode.LLM_ERROR))
    return await _handle_service_error(
        request, exc=exc, code=code, status_code=status_code
    )


async def review_error_handler(
    request: Request, exc: ReviewServiceError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en producción.
    """
    request_id = _request_id_from(request)
    settings = get_settings()

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = str(exc) if not settings.is_production() else "Error interno."

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
        errors=[{"request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException debe registrarse para respetar RFC7807.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(ReviewServiceError, review_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
