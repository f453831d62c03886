"""
Prompt Infrastructure (Infrastructure Layer)

Qué es
------
Facade/Barrel del paquete `infrastructure.prompts`.
Expone una API pública estable para cargar templates versionados y armar
el prompt de revisión.

Patrones
--------
- Facade / Barrel: re-export de símbolos públicos del paquete.
- Frontmatter: metadata parsing para validación.
"""

from .builder import (
    ReviewPrompt,
    build_review_prompt,
    build_rule_descriptions,
    preview_prompt,
)
from .loader import PromptLoader, PromptMetadata, get_prompt_loader, parse_frontmatter

__all__ = [
    "ReviewPrompt",
    "build_review_prompt",
    "build_rule_descriptions",
    "preview_prompt",
    "PromptLoader",
    "PromptMetadata",
    "get_prompt_loader",
    "parse_frontmatter",
]
