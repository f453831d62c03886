"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir ReviewFailure a HTTP Exceptions RFC7807.
  - Elegir el status según el tipo de falla del proveedor.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message [+ provider_kind]).
  - El mensaje del proveedor llega intacto al cliente (`detail`).

Colaboradores:
  - application.usecases (ReviewFailure, ReviewErrorCode)
  - crosscutting.error_responses (validation_error, llm_timeout, ...)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from docreview.application.usecases import ReviewErrorCode, ReviewFailure
from docreview.crosscutting.error_responses import (
    llm_error,
    llm_timeout,
    payment_required,
    rate_limited,
    unauthorized,
    validation_error,
)
from docreview.crosscutting.exceptions import ProviderErrorKind


def raise_review_error(error: ReviewFailure) -> NoReturn:
    """
    Traduce ReviewFailure -> HTTP.

    PROVIDER_ERROR:
      timeout -> 504, unauthorized -> 401, quota -> 402,
      rate_limited -> 429, resto -> 502
    """
    if error.code == ReviewErrorCode.VALIDATION_ERROR:
        details = [{"field": error.field, "msg": error.message}] if error.field else None
        raise validation_error(error.message, details)
    raise_provider_error(error.provider_kind, error.message)


def raise_provider_error(kind: ProviderErrorKind | None, message: str) -> NoReturn:
    if kind == ProviderErrorKind.TIMEOUT:
        raise llm_timeout(message)
    if kind == ProviderErrorKind.UNAUTHORIZED:
        raise unauthorized(message)
    if kind == ProviderErrorKind.QUOTA:
        raise payment_required(message)
    if kind == ProviderErrorKind.RATE_LIMITED:
        raise rate_limited(message)
    raise llm_error(message)
