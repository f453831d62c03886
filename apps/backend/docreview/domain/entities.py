"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (DocumentChunk, Suggestion, UsedRange, ParseResult)

Responsabilidades:
    - Definir las estructuras centrales de la revisión de documentos.
    - Modelar la máquina de estados de una sugerencia (pending -> accepted|rejected).
    - Proveer la serialización al contrato de wire (camelCase) que consume el cliente.

Colaboradores:
    - application/review: produce y transforma estas entidades.
    - interfaces/api: serializa ReviewResult -> JSON / NDJSON.

Principios:
    - Sin dependencias a FastAPI/httpx/SDKs.
    - Datos + comportamiento mínimo (transiciones de estado, helpers de span).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..crosscutting.exceptions import InvalidStatusTransition

# ---------------------------------------------------------------------------
# DocumentChunk
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DocumentChunk:
    """
    Fragmento contiguo del documento, alineado a párrafos.

    Notas:
      - `start` es el offset (en caracteres) del fragmento dentro del documento.
      - Se produce una vez y no se modifica.
    """

    start: int
    text: str
    index: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


# ---------------------------------------------------------------------------
# Suggestion
# ---------------------------------------------------------------------------


class SuggestionType(str, Enum):
    """Severidad de una sugerencia."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def coerce(cls, value: Any) -> "SuggestionType":
        """Valor inválido o ausente -> SUGGESTION."""
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        return cls.SUGGESTION


_SEVERITY: Dict[SuggestionType, int] = {
    SuggestionType.ERROR: 3,
    SuggestionType.WARNING: 2,
    SuggestionType.SUGGESTION: 1,
}


class SuggestionStatus(str, Enum):
    """Estado de revisión de una sugerencia."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class Suggestion:
    """
    Una edición propuesta: span de origen, reemplazo, severidad y motivo.

    Invariantes (una vez anclada):
      - offset >= 0 y offset + length <= len(texto de referencia)
      - texto[offset : offset + length] == original
    """

    id: str
    offset: int
    length: int
    type: SuggestionType
    original: str
    suggestion: str
    reason: str = ""
    rule_category: str = ""
    status: SuggestionStatus = SuggestionStatus.PENDING

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def severity(self) -> int:
        return self.type.severity

    def is_anchored_in(self, text: str) -> bool:
        """True si el span coincide exactamente con `text`."""
        if self.offset < 0 or self.end > len(text):
            return False
        return text[self.offset : self.end] == self.original

    # -- máquina de estados ---------------------------------------------------

    def accept(self) -> None:
        self._transition(SuggestionStatus.ACCEPTED)

    def reject(self) -> None:
        self._transition(SuggestionStatus.REJECTED)

    def _transition(self, target: SuggestionStatus) -> None:
        if self.status is not SuggestionStatus.PENDING:
            raise InvalidStatusTransition(
                f"Suggestion '{self.id}' is already {self.status.value}",
                current=self.status.value,
                target=target.value,
            )
        self.status = target

    # -- wire -----------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "offset": self.offset,
            "length": self.length,
            "type": self.type.value,
            "original": self.original,
            "suggestion": self.suggestion,
            "reason": self.reason,
            "ruleCategory": self.rule_category,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suggestion":
        """Inverso de to_dict (registros persistidos en el historial del cliente)."""
        return cls(
            id=str(data["id"]),
            offset=int(data["offset"]),
            length=int(data["length"]),
            type=SuggestionType.coerce(data.get("type")),
            original=str(data.get("original", "")),
            suggestion=str(data.get("suggestion", "")),
            reason=str(data.get("reason", "")),
            rule_category=str(data.get("ruleCategory", "")),
            status=SuggestionStatus(data.get("status", SuggestionStatus.PENDING.value)),
        )


# ---------------------------------------------------------------------------
# Anclaje
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UsedRange:
    """Intervalo semiabierto [start, end) ya reclamado durante un pase de anclaje."""

    start: int
    end: int

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.end and end > self.start


# ---------------------------------------------------------------------------
# Resultados
# ---------------------------------------------------------------------------


@dataclass
class ParseResult:
    """
    Resultado de parsear UNA respuesta del modelo.

    Campos:
      - suggestions: sugerencias válidas (offsets relativos a la referencia usada).
      - raw_response: texto crudo devuelto por el modelo (debug).
      - parse_error: advertencia no fatal (o None).
    """

    suggestions: List[Suggestion]
    raw_response: str
    parse_error: Optional[str] = None


@dataclass
class ChunkResult:
    """Sugerencias de un chunk (offsets relativos al chunk)."""

    chunk: DocumentChunk
    suggestions: List[Suggestion] = field(default_factory=list)


@dataclass
class ReviewResult:
    """Resultado final entregado al cliente (contrato de wire)."""

    suggestions: List[Suggestion]
    raw_response: str
    parse_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "rawResponse": self.raw_response,
            "parseError": self.parse_error,
        }
