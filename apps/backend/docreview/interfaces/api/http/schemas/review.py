"""
===============================================================================
TARJETA CRC — schemas/review.py
===============================================================================

Módulo:
    Schemas HTTP para revisión, catálogo de reglas y detección de escena

Responsabilidades:
    - DTOs request/response con el contrato de wire en camelCase
      (`customPrompt`, `chunkSize`, `rawResponse`, `parseError`, ...).
    - Validar tipos y límites gruesos; las reglas de negocio (texto vacío,
      reglas desconocidas) las valida el use case con mensajes para la UI.

Colaboradores:
    - crosscutting.config.get_settings (límites)
    - domain.entities.Suggestion (forma de cada sugerencia)
===============================================================================
"""

from __future__ import annotations

from typing import Literal, Optional

from docreview.crosscutting.config import get_settings
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_settings = get_settings()


class _CamelModel(BaseModel):
    """Acepta y emite camelCase (y snake_case al construir desde Python)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class ReviewReq(_CamelModel):
    """Request de revisión (sincrónica o streaming)."""

    text: str
    rules: list[str] = Field(default_factory=list)
    custom_prompt: str = Field(default="")
    model: Optional[str] = Field(default=None, max_length=200)
    chunk_size: Optional[int] = Field(
        default=None, ge=0, le=_settings.max_document_chars
    )


class PromptPreviewReq(_CamelModel):
    rules: list[str] = Field(default_factory=list)
    custom_prompt: str = Field(default="")


class DetectSceneReq(_CamelModel):
    text: str


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class SuggestionRes(_CamelModel):
    id: str
    offset: int
    length: int
    type: Literal["error", "warning", "suggestion"]
    original: str
    suggestion: str
    reason: str
    rule_category: str
    status: Literal["pending", "accepted", "rejected"]


class ReviewRes(_CamelModel):
    """Response de revisión: sugerencias ancladas + respuesta cruda + advertencia."""

    suggestions: list[SuggestionRes]
    raw_response: str
    parse_error: Optional[str] = None


class PromptPreviewRes(_CamelModel):
    system: str


class DetectSceneRes(_CamelModel):
    scene_pack_id: Optional[str] = None


class RuleRes(_CamelModel):
    id: str
    name: str
    description: str
    category: str
    prompt_text: str


class ScenePackRes(_CamelModel):
    id: str
    name: str
    description: str
    icon: str
    rule_ids: list[str]


class ModelRes(_CamelModel):
    id: str
    name: str
    provider: str
    note: str


class RulesCatalogRes(_CamelModel):
    """Catálogo que consume el selector de reglas del cliente."""

    rules: list[RuleRes]
    scene_packs: list[ScenePackRes]
    category_labels: dict[str, str]
    models: list[ModelRes]
    default_model: str
