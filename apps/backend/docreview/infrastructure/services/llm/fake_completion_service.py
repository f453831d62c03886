"""
Name: Fake Completion Service (Deterministic Test Double)

Qué es
------
Implementación determinista de `domain.services.CompletionService` para tests/CI.
No realiza IO ni llama APIs externas.

Modos
-----
- Sin guion: devuelve "[]" (revisión sin hallazgos).
- Con `replies`: dict user_text -> respuesta (str) o excepción a lanzar.
- Con `responder`: callable(user_text) -> str, para armar respuestas a partir del texto.
- `delays`: dict user_text -> segundos de espera (probar timeouts/orden de progreso).

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: FakeCompletionService
Responsibilities:
  - Producir respuestas deterministas por texto de entrada
  - Registrar las llamadas recibidas (asserts en tests)
Collaborators:
  - domain.services.CompletionService
Constraints:
  - Sin IO / sin dependencias externas
  - Mismas entradas -> misma salida
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Union

from ....crosscutting.logger import logger
from ....domain.services import CompletionService

Reply = Union[str, BaseException]

EMPTY_REVIEW = "[]"


@dataclass(frozen=True)
class FakeCall:
    system_prompt: str
    user_text: str
    model_id: str
    timeout_seconds: float


class FakeCompletionService(CompletionService):
    """R: Deterministic fake implementation of CompletionService."""

    def __init__(
        self,
        replies: Optional[Mapping[str, Reply]] = None,
        *,
        responder: Optional[Callable[[str], str]] = None,
        delays: Optional[Mapping[str, float]] = None,
        default_reply: str = EMPTY_REVIEW,
    ) -> None:
        self._replies: Dict[str, Reply] = dict(replies or {})
        self._responder = responder
        self._delays: Dict[str, float] = dict(delays or {})
        self._default_reply = default_reply
        self.calls: List[FakeCall] = []

        logger.info("FakeCompletionService initialized", extra={"scripted": len(self._replies)})

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        model_id: str,
        timeout_seconds: float,
    ) -> str:
        self.calls.append(FakeCall(system_prompt, user_text, model_id, timeout_seconds))

        delay = self._delays.get(user_text, 0.0)
        if delay:
            await asyncio.sleep(delay)

        reply = self._replies.get(user_text)
        if isinstance(reply, BaseException):
            raise reply
        if reply is not None:
            return reply
        if self._responder is not None:
            return self._responder(user_text)
        return self._default_reply
