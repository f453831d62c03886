"""docreview.infrastructure.services.retry

Name: Retry Helper with Exponential Backoff + Jitter

Qué es
------
Utilidad de **resiliencia** para llamadas al proveedor de completions.
Implementa:
  - Clasificación de errores: **transient** (reintentar) vs **permanent** (fail-fast)
  - Decorator de `tenacity` para aplicar **exponential backoff + jitter**
    (sirve tanto para funciones sync como para corutinas)
  - Logging estructurado de intentos de retry

CRC (Component Card)
--------------------
Component: retry helper
Responsibilities:
  - Decidir qué errores son reintentables
  - Proveer un decorator estándar (tenacity) con backoff+jitter
  - Loguear intentos y contexto útil para debugging
Collaborators:
  - tenacity (motor de retry)
  - crosscutting.config.get_settings (config de attempts/delays)
  - crosscutting.exceptions.ProviderError (errores ya mapeados por los adapters)
Constraints:
  - Reintentar SOLO errores transitorios (429, 5xx, connection issues)
  - No reintentar errores permanentes (400, 401, 402, 403, 404)
  - No reintentar timeouts del chunk: el deadline por chunk es el presupuesto total
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.config import get_settings
from ...crosscutting.exceptions import ProviderError, ProviderErrorKind
from ...crosscutting.logger import logger

T = TypeVar("T")


# ---------------------------------------------------------------------------
# HTTP code policies
# ---------------------------------------------------------------------------

# R: HTTP status codes que indican fallas transitorias (reintentables)
TRANSIENT_HTTP_CODES: frozenset[int] = frozenset(
    {
        408,  # Request Timeout
        429,  # Too Many Requests (rate limit)
        500,  # Internal Server Error
        502,  # Bad Gateway
        503,  # Service Unavailable
        504,  # Gateway Timeout
    }
)

# R: HTTP status codes que indican fallas permanentes (no reintentar)
PERMANENT_HTTP_CODES: frozenset[int] = frozenset(
    {
        400,  # Bad Request
        401,  # Unauthorized
        402,  # Payment Required (saldo insuficiente)
        403,  # Forbidden
        404,  # Not Found
    }
)

_RETRYABLE_PROVIDER_KINDS: frozenset[ProviderErrorKind] = frozenset(
    {ProviderErrorKind.RATE_LIMITED, ProviderErrorKind.UNAVAILABLE}
)


def get_http_status_code(exception: BaseException) -> int | None:
    """R: Extrae un status code HTTP desde distintos tipos de exception.

    Soporta (best-effort):
      - google.genai.errors.APIError (atributo `code`)
      - httpx.HTTPStatusError (exception.response.status_code)
      - ProviderError / SDKs que expongan `status_code`
    """
    code = getattr(exception, "code", None)
    # R: `code` puede ser un status gRPC; filtramos a códigos HTTP (>=100).
    if isinstance(code, int) and code >= 100:
        return code

    resp = getattr(exception, "response", None)
    status_code = getattr(resp, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    return None


def is_transient_error(exception: BaseException) -> bool:
    """R: Decide si un error es transitorio (reintentar) o permanente (fail-fast).

    Reglas (en orden):
      1) Si hay status code HTTP: permanent -> False, transient -> True.
      2) ProviderError: según su kind (rate limit / unavailable).
      3) Errores de conexión built-in: True.
      4) Heurística por nombre/mensaje para SDKs que no tipifican bien.
      5) Default: fail-fast (False).
    """
    status_code = get_http_status_code(exception)
    if status_code is not None:
        if status_code in PERMANENT_HTTP_CODES:
            return False
        if status_code in TRANSIENT_HTTP_CODES:
            return True

    if isinstance(exception, ProviderError):
        return exception.kind in _RETRYABLE_PROVIDER_KINDS

    if isinstance(exception, ConnectionError):
        return True

    exception_name = type(exception).__name__.lower()
    transient_name_patterns = (
        "connection",
        "connect",
        "temporary",
        "unavailable",
        "resourceexhausted",
        "aborted",
    )
    if any(p in exception_name for p in transient_name_patterns):
        return True

    message = str(exception).lower()
    transient_message_patterns = (
        "rate limit",
        "too many requests",
        "temporarily unavailable",
        "service unavailable",
        "connection reset",
        "connection refused",
        "network is unreachable",
    )
    return any(p in message for p in transient_message_patterns)


def _log_retry(retry_state: RetryCallState) -> None:
    """R: Loguea cada intento antes de dormir (before_sleep)."""
    fn = getattr(retry_state, "fn", None)
    fn_name = getattr(fn, "__name__", "unknown")
    wait_time = retry_state.next_action.sleep if retry_state.next_action is not None else 0

    exc: Optional[BaseException] = None
    if retry_state.outcome is not None:
        exc = retry_state.outcome.exception()

    logger.warning(
        "Retrying provider call",
        extra={
            "function": fn_name,
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(float(wait_time), 2),
            "error": str(exc) if exc else None,
            "error_type": type(exc).__name__ if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """R: Crea un decorator `tenacity` con exponential backoff + jitter.

    Config:
      - stop: `stop_after_attempt(max_attempts)`
      - wait: `wait_exponential_jitter(initial=base_delay, max=max_delay)`
      - retry: solo si `is_transient_error(exception)`
      - reraise: True (propaga la última excepción)
    """
    settings = get_settings()

    _max_attempts = settings.retry_max_attempts if max_attempts is None else max_attempts
    _base_delay = (
        settings.retry_base_delay_seconds if base_delay is None else float(base_delay)
    )
    _max_delay = settings.retry_max_delay_seconds if max_delay is None else float(max_delay)

    if _max_attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if _base_delay < 0:
        raise ValueError("base_delay must be >= 0")
    if _max_delay <= 0:
        raise ValueError("max_delay must be > 0")

    return retry(
        stop=stop_after_attempt(_max_attempts),
        wait=wait_exponential_jitter(initial=_base_delay, max=_max_delay, jitter=_base_delay),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )


def no_retry(func: Callable[..., Any]) -> Callable[..., Any]:
    """R: Decorator identidad (tests / fakes)."""
    return func
