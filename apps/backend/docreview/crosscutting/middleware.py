# apps/backend/docreview/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middlewares HTTP (contexto + límites de payload)
===============================================================================

Objetivo
--------
1) RequestContextMiddleware:
   - Generar/propagar request_id
   - Setear contextvars (method/path)
   - Log y métricas por request

2) BodyLimitMiddleware:
   - Rechazar documentos gigantes antes de parsear JSON (incluye chunked)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - RequestContextMiddleware
  - BodyLimitMiddleware

Colaboradores:
  - docreview/context.py
  - crosscutting/metrics.py
  - crosscutting/error_responses.py
===============================================================================
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import PROBLEM_JSON_MEDIA_TYPE, ErrorCode, ErrorDetail
from .logger import logger
from .metrics import record_request_metrics

_MAX_REQUEST_ID_CHARS = 128


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RequestContextMiddleware

    Responsabilidades:
      - Generar/aceptar X-Request-Id y devolverlo en la respuesta
      - Setear contextvars para correlación de logs
      - Emitir logs y métricas por request
      - Garantizar clear_context()
    ----------------------------------------------------------------------------
    """

    _QUIET_PATHS = {"/healthz", "/metrics"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get("x-request-id") or "").strip()
        request_id = (
            incoming if 0 < len(incoming) <= _MAX_REQUEST_ID_CHARS else str(uuid.uuid4())
        )

        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-Id"] = request_id
            return response
        except Exception:
            logger.exception(
                "request falló",
                extra={
                    "status_code": 500,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise
        finally:
            latency = time.perf_counter() - start
            record_request_metrics(
                endpoint=request.url.path,
                method=request.method,
                status_code=status_code,
                latency_seconds=latency,
            )
            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round(latency * 1000, 2),
                    },
                )
            clear_context()


class _BodyTooLarge(Exception):
    pass


class BodyLimitMiddleware:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      BodyLimitMiddleware (ASGI puro)

    Responsabilidades:
      - Rechazar requests cuyo body exceda max_body_bytes (413 problem+json)
      - Funciona con Content-Length y con transferencia chunked
    ----------------------------------------------------------------------------
    """

    def __init__(self, app, max_body_bytes: int | None = None):
        from .config import get_settings

        self.app = app
        self._max_bytes = max_body_bytes or get_settings().max_body_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.decode().lower(): v.decode() for k, v in scope.get("headers", [])}
        path = scope.get("path", "")
        req_id = (headers.get("x-request-id") or "").strip() or str(uuid.uuid4())

        content_length = headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > self._max_bytes:
            logger.warning(
                "payload demasiado grande (por content-length)",
                extra={"content_length": content_length, "max_bytes": self._max_bytes},
            )
            await self._send_413(send, path=path, request_id=req_id)
            return

        started = False
        received = 0

        async def send_wrapper(message):
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        async def receive_limited():
            nonlocal received
            msg = await receive()
            if msg["type"] == "http.request":
                received += len(msg.get("body", b"") or b"")
                if received > self._max_bytes:
                    raise _BodyTooLarge()
            return msg

        try:
            await self.app(scope, receive_limited, send_wrapper)
        except _BodyTooLarge:
            # Con la respuesta ya iniciada no se puede enviar otra.
            if started:
                logger.error(
                    "payload excedió límite luego de iniciar respuesta",
                    extra={"path": path},
                )
                raise
            logger.warning(
                "payload demasiado grande (streaming)",
                extra={"received_bytes": received, "max_bytes": self._max_bytes},
            )
            await self._send_413(send, path=path, request_id=req_id)

    async def _send_413(self, send, *, path: str, request_id: str) -> None:
        problem = ErrorDetail(
            type="about:blank/payload_too_large",
            title="Payload Too Large",
            status=413,
            detail=f"Request body demasiado grande. Máximo permitido: {self._max_bytes} bytes",
            code=ErrorCode.PAYLOAD_TOO_LARGE,
            instance=path,
            errors=[{"request_id": request_id}],
        ).model_dump(mode="json", exclude_none=True)

        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", PROBLEM_JSON_MEDIA_TYPE.encode()),
                    (b"x-request-id", request_id.encode()),
                ],
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": json.dumps(problem, ensure_ascii=False).encode("utf-8"),
            }
        )
