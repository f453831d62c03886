"""
===============================================================================
TARJETA CRC — docreview/context.py (Contexto por request / chunk)
===============================================================================

Responsabilidades:
  - Mantener contexto “request-scoped” usando ContextVars (async-safe).
  - Correlacionar logs de cada chunk de una revisión sin pasar parámetros por todo el stack.
  - Proveer helpers mínimos: set_*(), get_context_dict(), clear_context().

Colaboradores:
  - crosscutting/middleware.py: setea request_id/method/path al inicio del request.
  - crosscutting/logger.py: enriquece logs leyendo get_context_dict().
  - application/usecases/review_document.py: setea chunk_index dentro de cada task.

Notas:
  - asyncio copia el contexto al crear cada Task, por eso chunk_index
    seteado dentro de una task no se filtra a las tasks hermanas.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

# Índice del chunk en proceso ("" fuera del fan-out).
chunk_index_var: ContextVar[str] = ContextVar("chunk_index", default="")

_CTX_REQUEST_ID: Final[str] = "request_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"
_CTX_CHUNK_INDEX: Final[str] = "chunk_index"


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """
    Setea el contexto mínimo del request.

    Regla:
      - Strings vacíos significan “no disponible”.
    """
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def set_chunk_context(index: int) -> None:
    chunk_index_var.set(str(index))


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, omitiendo claves vacías."""
    ctx: dict[str, str] = {}

    if val := request_id_var.get():
        ctx[_CTX_REQUEST_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val
    if val := chunk_index_var.get():
        ctx[_CTX_CHUNK_INDEX] = val

    return ctx


def clear_context() -> None:
    """Limpia el contexto al final del request."""
    request_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
    chunk_index_var.set("")
