"""
===============================================================================
CRC CARD — application/review/coalescer.py
===============================================================================

Componente:
  Overlap Coalescer

Responsabilidades:
  - Fusionar sugerencias cuyos spans se solapan de verdad (no adyacentes).
  - Acotar el span fusionado a `coalesce_max_span` caracteres.
  - Re-cortar el original desde el documento (sin concatenar strings).

Colaboradores:
  - application/review/options.py
  - application/review/reconciler.py

Reglas de fusión:
  - suggestion: la del candidato con `original` más largo, extendida con el
    texto del documento que la unión cubre y el ganador no.
  - type / reason / rule_category: del candidato de mayor severidad
    (empate -> el acumulado).
  - id: el del acumulado.
  - Sugerencias no ancladas no participan; se reinsertan por offset.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from ...domain.entities import Suggestion
from .options import ReconcileOptions


def _merge_pair(current: Suggestion, nxt: Suggestion, document: str) -> Suggestion:
    start = current.offset
    end = max(current.end, nxt.end)

    winner = nxt if len(nxt.original) > len(current.original) else current
    severest = nxt if nxt.severity > current.severity else current

    # El texto del ganador se inserta en el span unido, no se copia tal cual.
    replacement = (
        document[start : winner.offset]
        + winner.suggestion
        + document[winner.end : end]
    )

    return replace(
        current,
        offset=start,
        length=end - start,
        original=document[start:end],
        suggestion=replacement,
        type=severest.type,
        reason=severest.reason,
        rule_category=severest.rule_category,
    )


def coalesce_suggestions(
    suggestions: List[Suggestion],
    document: str,
    options: Optional[ReconcileOptions] = None,
) -> List[Suggestion]:
    """
    Pase final: fusiona spans solapados (acotados) y devuelve la lista por offset.
    """
    opts = options or ReconcileOptions()

    anchored = sorted(
        (s for s in suggestions if s.is_anchored_in(document)), key=lambda s: s.offset
    )
    loose = [s for s in suggestions if not s.is_anchored_in(document)]

    coalesced: List[Suggestion] = []
    current: Optional[Suggestion] = None

    for nxt in anchored:
        if current is None:
            current = nxt
            continue

        overlaps = nxt.offset < current.end
        span = max(current.end, nxt.end) - current.offset
        if overlaps and span <= opts.coalesce_max_span:
            current = _merge_pair(current, nxt, document)
        else:
            coalesced.append(current)
            current = nxt

    if current is not None:
        coalesced.append(current)

    return sorted(coalesced + loose, key=lambda s: s.offset)
