"""
===============================================================================
CRC CARD — application/review/anchoring.py
===============================================================================

Componente:
  Offset Anchor Resolver

Responsabilidades:
  - Ubicar el texto reclamado por una sugerencia en su posición real dentro de
    un texto de referencia (chunk o documento completo).
  - Evitar que dos sugerencias reclamen el mismo texto (UsedRange).
  - Nunca inventar una posición: si no se encuentra, la sugerencia queda sin anclar.

Colaboradores:
  - application/review/response_parser.py (pase por chunk)
  - application/review/reconciler.py (pase global tras el merge)
  - domain/entities.py (Suggestion, UsedRange)

Algoritmo (determinístico, leftmost-first):
  1) Fast path: el offset reportado ya coincide y no choca con rangos usados.
  2) Escaneo izquierda->derecha de todas las ocurrencias literales; gana la
     primera sin conflicto.
  3) Ninguna -> -1.
===============================================================================
"""

from __future__ import annotations

from typing import Iterable, List

from ...crosscutting.exceptions import AnchorError
from ...crosscutting.logger import logger
from ...domain.entities import Suggestion, UsedRange

UNRESOLVED = -1


def _conflicts(used_ranges: Iterable[UsedRange], start: int, end: int) -> bool:
    return any(r.overlaps(start, end) for r in used_ranges)


def resolve_offset(
    reference_text: str,
    claimed_original: str,
    claimed_offset: int,
    used_ranges: List[UsedRange],
) -> int:
    """Offset real de `claimed_original` en `reference_text`, o -1."""
    size = len(claimed_original)

    if (
        claimed_offset >= 0
        and claimed_offset + size <= len(reference_text)
        and reference_text[claimed_offset : claimed_offset + size] == claimed_original
        and not _conflicts(used_ranges, claimed_offset, claimed_offset + size)
    ):
        return claimed_offset

    search_from = 0
    while True:
        idx = reference_text.find(claimed_original, search_from)
        if idx == -1:
            return UNRESOLVED
        if not _conflicts(used_ranges, idx, idx + size):
            return idx
        search_from = idx + 1


def anchor_suggestion(
    reference_text: str, suggestion: Suggestion, used_ranges: List[UsedRange]
) -> None:
    """
    Ancla una sugerencia en sitio y reclama su rango.

    Raises:
        AnchorError: el texto no aparece (o solo aparece en rangos ya usados).
    """
    offset = resolve_offset(
        reference_text, suggestion.original, suggestion.offset, used_ranges
    )
    if offset == UNRESOLVED:
        raise AnchorError(
            f"Original text of suggestion '{suggestion.id}' not found without conflicts"
        )

    suggestion.offset = offset
    suggestion.length = len(suggestion.original)
    used_ranges.append(UsedRange(offset, suggestion.end))


def anchor_suggestions(reference_text: str, suggestions: List[Suggestion]) -> int:
    """
    Pase de anclaje con rangos usados frescos, en el orden recibido.

    Las sugerencias sin `original` se saltean. Las no resueltas conservan su
    offset/length previos (quedan sin anclar).

    Returns:
        cantidad de sugerencias no resueltas.
    """
    used_ranges: List[UsedRange] = []
    unresolved = 0

    for suggestion in suggestions:
        if not suggestion.original:
            continue
        try:
            anchor_suggestion(reference_text, suggestion, used_ranges)
        except AnchorError as exc:
            unresolved += 1
            logger.debug(
                "Anchor: suggestion left unanchored",
                extra={
                    "error_code": exc.error_code,
                    "suggestion_id": suggestion.id,
                    "claimed_offset": suggestion.offset,
                },
            )

    return unresolved
