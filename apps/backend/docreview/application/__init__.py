"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables de la capa de aplicación:
  - reconcile / ReconcileOptions: pipeline de reconciliación de sugerencias
  - chunk_document / parse_review_response: etapas por chunk

Nota:
  - Los casos de uso se importan desde `usecases/`.
===============================================================================
"""

from .review import (
    ReconcileOptions,
    ReconcileReport,
    chunk_document,
    parse_review_response,
    reconcile,
)

__all__ = [
    "ReconcileOptions",
    "ReconcileReport",
    "chunk_document",
    "parse_review_response",
    "reconcile",
]
