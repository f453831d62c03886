# apps/backend/docreview/crosscutting/streaming.py
"""
===============================================================================
MÓDULO: Streaming NDJSON (JSON por línea) para revisiones por chunk
===============================================================================

Objetivo
--------
- Emitir progreso a medida que cada chunk termina
- Emitir el resultado final (o el error) como última línea
- Cortar el trabajo si el cliente se desconecta

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  stream_review()

Responsabilidades:
  - Formatear eventos como NDJSON (`{...}\n`)
  - Orquestar el stream desde ReviewDocumentUseCase.stream

Colaboradores:
  - application/usecases/review_document.py
  - application/usecases/review_results.ReviewEvent
===============================================================================
"""

from __future__ import annotations

import json
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from fastapi.responses import StreamingResponse

from ..application.usecases.review_results import ReviewEvent
from .logger import logger

NDJSON_MEDIA_TYPE = "application/x-ndjson"

_MSG_STREAM_ERROR = "审校服务出现未知错误"


def stream_review(
    events: AsyncIterator[ReviewEvent],
    request: Request,
) -> StreamingResponse:
    """
    NDJSON Events:
      - progress: {"type":"progress","current":k,"total":n}
      - result:   {"type":"result","suggestions":[...],"rawResponse":"...","parseError":...}
      - error:    {"type":"error","error":"..."}
    """
    return StreamingResponse(
        _generate_ndjson(events, request),
        media_type=NDJSON_MEDIA_TYPE,
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


async def _generate_ndjson(
    events: AsyncIterator[ReviewEvent],
    request: Request,
) -> AsyncGenerator[str, None]:
    try:
        async for event in events:
            if not event.is_terminal and await request.is_disconnected():
                logger.info("NDJSON: cliente desconectado")
                return
            yield ndjson_line(event.to_dict())
    except Exception:
        # La respuesta ya empezó (200): el error viaja como último evento.
        logger.exception("NDJSON stream error")
        yield ndjson_line({"type": "error", "error": _MSG_STREAM_ERROR})
    finally:
        aclose = getattr(events, "aclose", None)
        if aclose is not None:
            await aclose()


def ndjson_line(data: dict) -> str:
    return json.dumps(data, ensure_ascii=False) + "\n"
