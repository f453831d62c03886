"""
===============================================================================
CRC CARD — application/review/chunk_merger.py
===============================================================================

Componente:
  Chunk Merger

Responsabilidades:
  - Convertir offsets relativos al chunk en offsets absolutos del documento.
  - Concatenar y ordenar (estable) por offset.
  - Deduplicar por (offset, original).

Colaboradores:
  - domain/entities.py (ChunkResult, Suggestion)
  - application/review/reconciler.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Set, Tuple

from ...domain.entities import ChunkResult, Suggestion


def merge_chunk_results(results: Iterable[ChunkResult]) -> List[Suggestion]:
    """
    Une los resultados por chunk en una lista global ordenada y sin duplicados.

    Notas:
      - Devuelve copias; las sugerencias de entrada no se tocan.
      - sorted() es estable: en empate gana el chunk de menor índice.
    """
    absolute: List[Suggestion] = [
        replace(s, offset=s.offset + result.chunk.start)
        for result in results
        for s in result.suggestions
    ]
    absolute = sorted(absolute, key=lambda s: s.offset)

    seen: Set[Tuple[int, str]] = set()
    deduped: List[Suggestion] = []
    for s in absolute:
        key = (s.offset, s.original)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(s)

    return deduped
