"""
===============================================================================
REVIEW USE CASE RESULTS (Result / Error / Event Models)
===============================================================================

Name:
    Review Use Case Results

Business Goal:
    Proveer tipos consistentes para el resultado de una revisión, tanto en su
    forma sincrónica (un único resultado) como en streaming (eventos NDJSON).

Why (Context / Intención):
    - El use case devuelve resultados tipados en lugar de propagar excepciones.
    - Las fallas parciales viajan como `parseError` (advertencia) dentro del
      resultado; solo la falla total se modela como ReviewFailure.
    - El mapeo a HTTP (status + RFC7807) vive en interfaces/api.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    review_results models (module)

Responsibilities:
    - Definir ReviewErrorCode como conjunto estable de categorías de error.
    - Definir ReviewFailure como contrato mínimo de error.
    - Definir ReviewDocumentResult (éxito XOR error).
    - Definir ReviewEvent (progress / result / error) y su forma de wire.

Collaborators:
    - domain.entities.ReviewResult
    - crosscutting.exceptions.ProviderErrorKind
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ...crosscutting.exceptions import ProviderErrorKind
from ...domain.entities import ReviewResult


class ReviewErrorCode(str, Enum):
    """
    Categorías de error del caso de uso de revisión.

    Códigos:
      - VALIDATION_ERROR: input inválido/incompleto (texto vacío, sin reglas, ...).
      - PROVIDER_ERROR: ningún chunk produjo sugerencias y al menos uno falló
        en el proveedor (timeout, auth, quota, rate limit, ...).
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"


@dataclass(frozen=True)
class ReviewFailure:
    """
    Error de caso de uso para la revisión.

    Campos:
      - code: ReviewErrorCode (categoría estable)
      - message: mensaje para el usuario (en chino, como lo muestra la UI)
      - provider_kind: tipo de falla del proveedor (solo PROVIDER_ERROR)
      - field: campo inválido (solo VALIDATION_ERROR)
    """

    code: ReviewErrorCode
    message: str
    provider_kind: Optional[ProviderErrorKind] = None
    field: Optional[str] = None


@dataclass
class ReviewDocumentResult:
    """
    Resultado de revisar un documento.

    Contrato:
      - Éxito: result != None y error == None (result.parse_error puede
        traer una advertencia no fatal).
      - Falla:  result == None y error != None
    """

    result: Optional[ReviewResult] = None
    error: Optional[ReviewFailure] = None


class ReviewEventType(str, Enum):
    PROGRESS = "progress"
    RESULT = "result"
    ERROR = "error"


@dataclass(frozen=True)
class ReviewEvent:
    """
    Evento del stream de revisión.

    Types:
      - "progress": `current` chunks resueltos de `total`
      - "result":   resultado final (mismos campos que la respuesta sincrónica)
      - "error":    falla total o de validación

    Los eventos terminales (result / error) cargan el ReviewDocumentResult
    completo, así execute() y stream() comparten una sola implementación.
    """

    type: ReviewEventType
    current: int = 0
    total: int = 0
    outcome: Optional[ReviewDocumentResult] = None

    @classmethod
    def progress(cls, current: int, total: int) -> "ReviewEvent":
        return cls(type=ReviewEventType.PROGRESS, current=current, total=total)

    @classmethod
    def terminal(cls, outcome: ReviewDocumentResult) -> "ReviewEvent":
        event_type = ReviewEventType.ERROR if outcome.error else ReviewEventType.RESULT
        return cls(type=event_type, outcome=outcome)

    @property
    def is_terminal(self) -> bool:
        return self.type is not ReviewEventType.PROGRESS

    def to_dict(self) -> Dict[str, Any]:
        if self.type is ReviewEventType.PROGRESS:
            return {"type": self.type.value, "current": self.current, "total": self.total}
        if self.type is ReviewEventType.ERROR:
            return {"type": self.type.value, "error": self.outcome.error.message}
        return {"type": self.type.value, **self.outcome.result.to_dict()}
