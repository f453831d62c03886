# apps/backend/docreview/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

Taxonomía de revisión
---------------------
- ResponseFormatError:    no hay payload estructurado en la respuesta del modelo.
- ResponseTruncatedError: el payload fue cortado y no se pudo reparar.
- ResponseSchemaError:    el payload parsea pero no es un array.
- AnchorError:            el texto reclamado no se ubica en la referencia.
- ProviderError:          fallas del proveedor de completions (timeout/auth/quota/...).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ReviewServiceError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP o a `parseError`
  - Generar error_id para rastreo

Colaboradores:
  - application/review/response_parser.py (convierte errores de formato en advertencias)
  - application/usecases/review_document.py (degrada ProviderError por chunk)
  - api/exception_handlers.py (mapea a AppHTTPException)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Estructura mínima para responder errores de forma consistente."""

    error_code: str
    message: str
    error_id: str

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class ReviewServiceError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      ReviewServiceError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "REVIEW_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code, message=self.message, error_id=self.error_id
        )


class ResponseFormatError(ReviewServiceError):
    """No se encontró un payload parseable en la respuesta del modelo."""

    error_code: str = "FORMAT_ERROR"


class ResponseTruncatedError(ResponseFormatError):
    """Salida cortada a mitad de stream que no se pudo reparar."""

    error_code: str = "TRUNCATION_ERROR"


class ResponseSchemaError(ReviewServiceError):
    """El payload parsea pero no tiene la forma esperada (array de objetos)."""

    error_code: str = "SCHEMA_ERROR"


class AnchorError(ReviewServiceError):
    """El texto reclamado no se puede ubicar (sin conflicto) en la referencia."""

    error_code: str = "ANCHOR_ERROR"


class ProviderErrorKind(str, Enum):
    TIMEOUT = "timeout"
    UNAUTHORIZED = "unauthorized"
    QUOTA = "quota"
    RATE_LIMITED = "rate_limited"
    EMPTY_RESPONSE = "empty_response"
    UNAVAILABLE = "unavailable"


class ProviderError(ReviewServiceError):
    """Errores del proveedor de completions (red / timeout / auth / quota)."""

    error_code: str = "PROVIDER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        kind: ProviderErrorKind = ProviderErrorKind.UNAVAILABLE,
        status_code: int | None = None,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, error_id=error_id, original_error=original_error)
        self.kind = kind
        self.status_code = status_code

    # -- factories (mensajes visibles para el usuario) ----------------------

    @classmethod
    def timeout(cls, seconds: float, original_error: Exception | None = None) -> "ProviderError":
        return cls(
            f"请求超时（{seconds:g}秒），请缩短文档或更换响应更快的模型",
            kind=ProviderErrorKind.TIMEOUT,
            original_error=original_error,
        )

    @classmethod
    def missing_api_key(cls) -> "ProviderError":
        return cls(
            "请先在设置中配置 OpenRouter API Key", kind=ProviderErrorKind.UNAUTHORIZED
        )

    @classmethod
    def from_status(
        cls,
        status_code: int,
        detail: str = "",
        *,
        provider: str = "OpenRouter",
        original_error: Exception | None = None,
    ) -> "ProviderError":
        """Status HTTP del proveedor -> ProviderError con kind y mensaje."""
        if status_code in (401, 403):
            kind = ProviderErrorKind.UNAUTHORIZED
            message = f"API Key 无效或已过期，请在设置中检查你的 {provider} API Key"
        elif status_code == 402:
            kind = ProviderErrorKind.QUOTA
            message = f"{provider} 账户余额不足，请充值后重试"
        elif status_code == 429:
            kind = ProviderErrorKind.RATE_LIMITED
            message = "请求频率过高，请稍后再试"
        else:
            kind = ProviderErrorKind.UNAVAILABLE
            message = f"AI 调用失败: {(detail or f'HTTP {status_code}')[:200]}"
        return cls(message, kind=kind, status_code=status_code, original_error=original_error)

    @classmethod
    def empty_response(cls, finish_reason: str | None = None) -> "ProviderError":
        if finish_reason == "length":
            message = "AI 推理过程过长，输出被截断。请缩短文档或更换模型（推荐 Claude Sonnet 4 或 Gemini Flash）"
        else:
            message = "AI 返回了空内容，请重试或更换模型"
        return cls(message, kind=ProviderErrorKind.EMPTY_RESPONSE)


class InvalidStatusTransition(ReviewServiceError):
    """Transición inválida de estado de una sugerencia (estado terminal)."""

    error_code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, message: str, *, current: str, target: str):
        super().__init__(message)
        self.current = current
        self.target = target
