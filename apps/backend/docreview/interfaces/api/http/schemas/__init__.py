"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Responsabilidades:
    - Re-exportar los DTOs HTTP (pydantic) del contrato de wire.

Notas:
    - Este archivo NO define modelos. Solo re-exporta.
===============================================================================
"""

from .review import (
    DetectSceneReq,
    DetectSceneRes,
    ModelRes,
    PromptPreviewReq,
    PromptPreviewRes,
    ReviewReq,
    ReviewRes,
    RuleRes,
    RulesCatalogRes,
    ScenePackRes,
    SuggestionRes,
)

__all__ = [
    "DetectSceneReq",
    "DetectSceneRes",
    "ModelRes",
    "PromptPreviewReq",
    "PromptPreviewRes",
    "ReviewReq",
    "ReviewRes",
    "RuleRes",
    "RulesCatalogRes",
    "ScenePackRes",
    "SuggestionRes",
]
