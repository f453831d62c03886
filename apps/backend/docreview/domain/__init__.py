"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Colaboradores:
    - domain.entities: DocumentChunk, Suggestion, UsedRange, resultados
    - domain.rules: catálogo de reglas, escenas y modelos
    - domain.services: puerto CompletionService

Reglas:
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    ChunkResult,
    DocumentChunk,
    ParseResult,
    ReviewResult,
    Suggestion,
    SuggestionStatus,
    SuggestionType,
    UsedRange,
)
from .rules import (
    AI_MODELS,
    CATEGORY_LABELS,
    CUSTOM_RULE_ID,
    RULE_TEMPLATES,
    SCENE_PACKS,
    AIModel,
    ReviewRuleTemplate,
    RuleCategory,
    ScenePack,
    detect_scene_pack,
    get_rule_template,
    get_scene_pack,
    is_known_rule,
)
from .services import CompletionService

__all__ = [
    "ChunkResult",
    "DocumentChunk",
    "ParseResult",
    "ReviewResult",
    "Suggestion",
    "SuggestionStatus",
    "SuggestionType",
    "UsedRange",
    "AI_MODELS",
    "CATEGORY_LABELS",
    "CUSTOM_RULE_ID",
    "RULE_TEMPLATES",
    "SCENE_PACKS",
    "AIModel",
    "ReviewRuleTemplate",
    "RuleCategory",
    "ScenePack",
    "detect_scene_pack",
    "get_rule_template",
    "get_scene_pack",
    "is_known_rule",
    "CompletionService",
]
