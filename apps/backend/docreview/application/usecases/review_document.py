"""
===============================================================================
USE CASE: Review Document (fan-out por chunk + reconciliación)
===============================================================================

Name:
    Review Document Use Case

Business Goal:
    Revisar un documento con un modelo de lenguaje y devolver sugerencias
    ancladas a posiciones exactas del texto original, aun cuando:
      - el documento se parte en varios chunks procesados en paralelo
      - algún chunk falla (timeout / auth / quota) o responde mal formado

Why (Context / Intención):
    - Un documento largo en una sola llamada tarda demasiado y se trunca.
    - Cada chunk es independiente: si uno falla, los demás siguen (bulkhead).
    - La reconciliación (merge / anclaje / trim / coalesce) es determinística
      y corre UNA vez, después de que todos los chunks terminaron.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ReviewDocumentUseCase

Responsibilities:
    - Validar input (texto, largo máximo, reglas conocidas, regla custom).
    - Partir el documento en chunks alineados a párrafos.
    - Lanzar una task por chunk (semáforo + deadline por clase de modelo).
    - Parsear cada respuesta contra el texto del chunk.
    - Reconciliar contra el documento completo.
    - Agregar rawResponse / parseError y decidir falla total.
    - Emitir eventos de progreso a medida que los chunks terminan.

Collaborators:
    - CompletionService (puerto): complete(system, user, model, timeout)
    - SystemPromptBuilder (callable): reglas + custom -> system prompt
    - application.review: chunk_document, parse_review_response, reconcile
    - crosscutting.metrics / crosscutting.timing

-------------------------------------------------------------------------------
STREAMING PROTOCOL
-------------------------------------------------------------------------------
    ReviewEvent(progress, current=0, total=N)
    ReviewEvent(progress, current=k, total=N)     # uno por chunk resuelto
    ReviewEvent(result | error, outcome=...)      # terminal

execute() consume el mismo stream y devuelve el outcome del evento terminal.
===============================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import (
    AsyncIterator,
    Callable,
    Final,
    FrozenSet,
    List,
    Optional,
    Sequence,
)

from ...context import set_chunk_context
from ...crosscutting.exceptions import ProviderError
from ...crosscutting.logger import logger
from ...crosscutting.metrics import (
    record_chunk_call,
    record_parse_advisory,
    record_reconcile_counts,
    record_review,
)
from ...crosscutting.timing import StageTimings
from ...domain.entities import ChunkResult, DocumentChunk, ReviewResult, Suggestion
from ...domain.rules import CUSTOM_RULE_ID, is_known_rule
from ...domain.services import CompletionService
from ..review import ReconcileOptions, chunk_document, parse_review_response, reconcile
from .review_results import (
    ReviewDocumentResult,
    ReviewErrorCode,
    ReviewEvent,
    ReviewFailure,
)

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
_DEFAULT_MAX_DOCUMENT_CHARS: Final[int] = 30_000
_DEFAULT_CHUNK_TIMEOUT_SECONDS: Final[float] = 55.0
_DEFAULT_THINKING_TIMEOUT_SECONDS: Final[float] = 100.0
_DEFAULT_MAX_CONCURRENCY: Final[int] = 8

_RAW_RESPONSE_SEPARATOR: Final[str] = "\n\n"

_MSG_EMPTY_TEXT: Final[str] = "文档内容不能为空"
_MSG_NO_RULES: Final[str] = "请至少选择一条审校规则"
_MSG_CUSTOM_PROMPT_REQUIRED: Final[str] = "已选择自定义规则，请填写自定义审校要求"

SystemPromptBuilder = Callable[[Sequence[str], str], str]


# -----------------------------------------------------------------------------
# DTOs
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ReviewDocumentInput:
    """
    DTO de entrada.

    Campos:
      - text: documento completo
      - rules: ids de reglas (orden del usuario)
      - custom_prompt: requisito libre (solo con la regla `custom`)
      - model: id del modelo (None -> default configurado)
      - chunk_size: tamaño objetivo de chunk (None -> default; <= 0 sin partir)
    """

    text: str
    rules: Sequence[str]
    custom_prompt: str = ""
    model: Optional[str] = None
    chunk_size: Optional[int] = None


@dataclass
class _ChunkSlot:
    """Salida de UNA task de chunk (cada task escribe solo su slot)."""

    chunk: DocumentChunk
    suggestions: List[Suggestion] = field(default_factory=list)
    raw_response: str = ""
    parse_error: Optional[str] = None
    provider_error: Optional[ProviderError] = None


# -----------------------------------------------------------------------------
# Use Case
# -----------------------------------------------------------------------------
class ReviewDocumentUseCase:
    """
    Use Case: revisión de documento con fan-out/fan-in por chunk.

    Estrategia:
        1) Validar input.
        2) Chunking (párrafos).
        3) Fan-out: una task por chunk, acotadas por semáforo.
        4) Fan-in: slots pre-dimensionados, uno por chunk.
        5) Reconciliar contra el documento completo.
        6) Agregar advertencias y decidir falla total.
    """

    def __init__(
        self,
        completion_service: CompletionService,
        system_prompt_builder: SystemPromptBuilder,
        *,
        default_model: str,
        options: Optional[ReconcileOptions] = None,
        thinking_models: FrozenSet[str] = frozenset(),
        max_document_chars: int = _DEFAULT_MAX_DOCUMENT_CHARS,
        default_chunk_size: int = 0,
        chunk_timeout_seconds: float = _DEFAULT_CHUNK_TIMEOUT_SECONDS,
        thinking_chunk_timeout_seconds: float = _DEFAULT_THINKING_TIMEOUT_SECONDS,
        max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
    ):
        self._completion_service = completion_service
        self._system_prompt_builder = system_prompt_builder
        self._default_model = default_model
        self._options = options or ReconcileOptions()
        self._thinking_models = thinking_models
        self._max_document_chars = max_document_chars
        self._default_chunk_size = default_chunk_size
        self._chunk_timeout = chunk_timeout_seconds
        self._thinking_chunk_timeout = thinking_chunk_timeout_seconds
        self._max_concurrency = max(1, max_concurrency)

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    async def execute(self, input_data: ReviewDocumentInput) -> ReviewDocumentResult:
        outcome = ReviewDocumentResult()
        async for event in self.stream(input_data):
            if event.is_terminal:
                outcome = event.outcome
        return outcome

    async def stream(self, input_data: ReviewDocumentInput) -> AsyncIterator[ReviewEvent]:
        failure = self.validate(input_data)
        if failure is not None:
            logger.info(
                "Review rejected by validation",
                extra={"field": failure.field, "error_code": failure.code.value},
            )
            yield ReviewEvent.terminal(ReviewDocumentResult(error=failure))
            return

        timings = StageTimings()
        model = self.resolve_model(input_data.model)
        chunk_size = (
            self._default_chunk_size
            if input_data.chunk_size is None
            else input_data.chunk_size
        )

        with timings.measure("chunking"):
            chunks = chunk_document(input_data.text, chunk_size)
            system_prompt = self._system_prompt_builder(
                list(input_data.rules), input_data.custom_prompt or ""
            )

        total = len(chunks)
        slots: List[Optional[_ChunkSlot]] = [None] * total
        yield ReviewEvent.progress(0, total)

        with timings.measure("completions"):
            async for settled in self._fan_out(chunks, slots, system_prompt, model):
                yield ReviewEvent.progress(settled, total)

        with timings.measure("reconcile"):
            outcome = self._finish(input_data.text, slots)

        logger.info(
            "Review finished",
            extra={
                "model": model,
                "chunks": total,
                "status": "failed" if outcome.error else "ok",
                "suggestions": len(outcome.result.suggestions) if outcome.result else 0,
                **timings.to_dict(),
            },
        )
        yield ReviewEvent.terminal(outcome)

    def validate(self, input_data: ReviewDocumentInput) -> Optional[ReviewFailure]:
        text = input_data.text or ""
        if not text.strip():
            return _validation_failure(_MSG_EMPTY_TEXT, "text")
        if len(text) > self._max_document_chars:
            return _validation_failure(
                f"文档过长（{len(text)} 字），最多支持 {self._max_document_chars} 字",
                "text",
            )

        rules = list(input_data.rules or [])
        if not rules:
            return _validation_failure(_MSG_NO_RULES, "rules")
        unknown = [rule_id for rule_id in rules if not is_known_rule(rule_id)]
        if unknown:
            return _validation_failure(f"未知的审校规则: {', '.join(unknown)}", "rules")
        if CUSTOM_RULE_ID in rules and not (input_data.custom_prompt or "").strip():
            return _validation_failure(_MSG_CUSTOM_PROMPT_REQUIRED, "customPrompt")
        return None

    def resolve_model(self, model: Optional[str]) -> str:
        return (model or "").strip() or self._default_model

    def timeout_for(self, model: str) -> float:
        """Los modelos que razonan antes de responder tienen más presupuesto."""
        if model in self._thinking_models:
            return self._thinking_chunk_timeout
        return self._chunk_timeout

    # ------------------------------------------------------------------
    # Fan-out / fan-in
    # ------------------------------------------------------------------
    async def _fan_out(
        self,
        chunks: Sequence[DocumentChunk],
        slots: List[Optional[_ChunkSlot]],
        system_prompt: str,
        model: str,
    ) -> AsyncIterator[int]:
        """Yields la cantidad de chunks resueltos cada vez que uno termina."""
        semaphore = asyncio.Semaphore(self._max_concurrency)
        timeout = self.timeout_for(model)
        tasks = [
            asyncio.create_task(
                self._review_chunk(chunk, slots, system_prompt, model, timeout, semaphore)
            )
            for chunk in chunks
        ]
        try:
            settled = 0
            for next_done in asyncio.as_completed(tasks):
                await next_done
                settled += 1
                yield settled
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _review_chunk(
        self,
        chunk: DocumentChunk,
        slots: List[Optional[_ChunkSlot]],
        system_prompt: str,
        model: str,
        timeout: float,
        semaphore: asyncio.Semaphore,
    ) -> None:
        set_chunk_context(chunk.index)
        slot = _ChunkSlot(chunk=chunk)
        slots[chunk.index] = slot

        async with semaphore:
            started = time.perf_counter()
            try:
                reply = await asyncio.wait_for(
                    self._completion_service.complete(
                        system_prompt, chunk.text, model, timeout
                    ),
                    timeout=timeout,
                )
            except asyncio.TimeoutError as exc:
                slot.provider_error = ProviderError.timeout(timeout, original_error=exc)
            except ProviderError as exc:
                slot.provider_error = exc
            except Exception as exc:
                logger.error(
                    "Chunk review: unexpected provider failure",
                    exc_info=True,
                    extra={"chunk_index": chunk.index, "error_type": type(exc).__name__},
                )
                slot.provider_error = ProviderError.from_status(
                    503, str(exc) or type(exc).__name__, original_error=exc
                )
            latency = time.perf_counter() - started

        if slot.provider_error is not None:
            kind = slot.provider_error.kind.value
            record_chunk_call(kind, latency)
            logger.warning(
                "Chunk review failed",
                extra={
                    "chunk_index": chunk.index,
                    "error_kind": kind,
                    "error_id": slot.provider_error.error_id,
                    "latency_ms": round(latency * 1000, 2),
                },
            )
            return

        record_chunk_call("ok", latency)
        parsed = parse_review_response(reply, chunk.text)
        slot.suggestions = parsed.suggestions
        slot.raw_response = parsed.raw_response
        slot.parse_error = parsed.parse_error
        if parsed.parse_error:
            record_parse_advisory()

    def _finish(
        self, document: str, slots: Sequence[Optional[_ChunkSlot]]
    ) -> ReviewDocumentResult:
        settled = [slot for slot in slots if slot is not None]
        report = reconcile(
            document,
            [ChunkResult(chunk=s.chunk, suggestions=s.suggestions) for s in settled],
            self._options,
        )
        record_reconcile_counts(report.counts())

        provider_errors = [s.provider_error for s in settled if s.provider_error]
        if not report.suggestions and provider_errors:
            first = provider_errors[0]
            record_review("failed", len(slots))
            return ReviewDocumentResult(
                error=ReviewFailure(
                    code=ReviewErrorCode.PROVIDER_ERROR,
                    message=first.message,
                    provider_kind=first.kind,
                )
            )

        if provider_errors:
            parse_error: Optional[str] = provider_errors[0].message
        else:
            parse_error = next((s.parse_error for s in settled if s.parse_error), None)

        record_review("partial" if parse_error else "ok", len(slots))
        return ReviewDocumentResult(
            result=ReviewResult(
                suggestions=report.suggestions,
                raw_response=_RAW_RESPONSE_SEPARATOR.join(
                    s.raw_response for s in settled if s.raw_response
                ),
                parse_error=parse_error,
            )
        )


def _validation_failure(message: str, field_name: str) -> ReviewFailure:
    return ReviewFailure(
        code=ReviewErrorCode.VALIDATION_ERROR, message=message, field=field_name
    )
