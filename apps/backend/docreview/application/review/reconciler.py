"""
===============================================================================
CRC CARD — application/review/reconciler.py
===============================================================================

Componente:
  Pipeline de reconciliación post fan-in

Responsabilidades:
  - Encadenar: merge -> anclaje global -> trim -> coalesce.
  - Reportar conteos por etapa (logs / métricas).

Colaboradores:
  - chunk_merger.merge_chunk_results
  - anchoring.anchor_suggestions
  - trimmer.trim_suggestions
  - coalescer.coalesce_suggestions
  - application/usecases/review_document.py

Notas:
  - Sin IO ni awaits: corre una vez que todos los chunks terminaron.
  - El anclaje global usa rangos frescos y recorre en orden de offset, así
    conflictos entre chunks distintos se resuelven leftmost-first.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ...crosscutting.logger import logger
from ...domain.entities import ChunkResult, Suggestion
from .anchoring import anchor_suggestions
from .chunk_merger import merge_chunk_results
from .coalescer import coalesce_suggestions
from .options import ReconcileOptions
from .trimmer import trim_suggestions


@dataclass(frozen=True)
class ReconcileReport:
    suggestions: List[Suggestion]
    deduplicated: int = 0
    unanchored: int = 0
    trimmed: int = 0
    coalesced: int = 0

    def counts(self) -> dict[str, int]:
        return {
            "final": len(self.suggestions),
            "deduplicated": self.deduplicated,
            "unanchored": self.unanchored,
            "trimmed": self.trimmed,
            "coalesced": self.coalesced,
        }


def reconcile(
    document: str,
    chunk_results: Iterable[ChunkResult],
    options: Optional[ReconcileOptions] = None,
) -> ReconcileReport:
    results = list(chunk_results)
    total = sum(len(r.suggestions) for r in results)

    merged = merge_chunk_results(results)
    unanchored = anchor_suggestions(document, merged)

    trimmed = trim_suggestions(merged, document, options)
    trimmed_count = sum(1 for before, after in zip(merged, trimmed) if before is not after)

    final = coalesce_suggestions(trimmed, document, options)

    report = ReconcileReport(
        suggestions=final,
        deduplicated=total - len(merged),
        unanchored=unanchored,
        trimmed=trimmed_count,
        coalesced=len(trimmed) - len(final),
    )
    logger.info("Reconciliation finished", extra=report.counts())
    return report
