"""
===============================================================================
REVIEW USE CASES PACKAGE (Public API / Exports)
===============================================================================

Expone el caso de uso de revisión y sus modelos de resultado:
  - ReviewDocumentUseCase / ReviewDocumentInput
  - ReviewDocumentResult / ReviewFailure / ReviewErrorCode
  - ReviewEvent / ReviewEventType (streaming NDJSON)
===============================================================================
"""

from __future__ import annotations

from .review_document import (
    ReviewDocumentInput,
    ReviewDocumentUseCase,
    SystemPromptBuilder,
)
from .review_results import (
    ReviewDocumentResult,
    ReviewErrorCode,
    ReviewEvent,
    ReviewEventType,
    ReviewFailure,
)

__all__ = [
    "ReviewDocumentInput",
    "ReviewDocumentUseCase",
    "SystemPromptBuilder",
    "ReviewDocumentResult",
    "ReviewErrorCode",
    "ReviewEvent",
    "ReviewEventType",
    "ReviewFailure",
]
