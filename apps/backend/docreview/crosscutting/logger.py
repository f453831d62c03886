# apps/backend/docreview/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Loguear de forma parseable (JSON), correlacionable (request_id) y segura
(redacción de API keys, recorte de respuestas crudas del modelo).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON (una línea por evento)
  - Enriquecer con contexto (request_id, method, path)
  - Redactar campos sensibles y limitar tamaños

Colaboradores:
  - docreview/context.py (ContextVars)
  - crosscutting/config.py (log_level / log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# Atributos propios del LogRecord: no se copian como "extra".
_RESERVED_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys() | {"message", "taskName"}
)

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "api_key",
        "apikey",
        "authorization",
        "x-api-key",
        "token",
        "secret",
        "password",
        "openrouter_api_key",
        "google_api_key",
    }
)

_REDACTED = "***REDACTADO***"


def _sanitize(value: Any, *, key: str | None = None, depth: int = 0, max_str: int = 4_000) -> Any:
    """Redacta claves sensibles y recorta strings/estructuras grandes."""
    if key and key.lower() in _SENSITIVE_KEYS:
        return _REDACTED
    if depth > 4:
        return "***TRUNCADO***"
    if isinstance(value, str):
        return value if len(value) <= max_str else value[:max_str] + "…(truncado)"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes {len(value)}B>"
    if isinstance(value, dict):
        return {
            str(k): _sanitize(v, key=str(k), depth=depth + 1, max_str=max_str)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_sanitize(v, key=key, depth=depth + 1, max_str=max_str) for v in value]
    return value


class JSONFormatter(logging.Formatter):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      JSONFormatter

    Responsabilidades:
      - Convertir LogRecord -> JSON
      - Enriquecer con contexto de request
      - Adjuntar stacktrace cuando hay excepción

    Colaboradores:
      - docreview/context.get_context_dict()
    ----------------------------------------------------------------------------
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _RESERVED_KEYS:
                continue
            payload[k] = _sanitize(v, key=k)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "docreview") -> logging.Logger:
    """
    Crea y configura el logger global.

    - Evita duplicación de handlers en reimport
    - Respeta log_level / log_json desde Settings
    """
    from .config import get_settings

    settings = get_settings()
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if settings.log_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Instancia global (import-friendly)
logger = setup_logger()
