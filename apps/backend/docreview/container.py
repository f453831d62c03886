"""
===============================================================================
TARJETA CRC — docreview/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (proveedor de completions, prompts, use case).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para recursos pesados
    (cliente httpx, cliente google-genai, templates de prompt).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - docreview.crosscutting.config.get_settings
  - docreview.domain.services.CompletionService (puerto)
  - docreview.infrastructure.* (implementaciones)
  - docreview.application.usecases.ReviewDocumentUseCase

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (el use case depende del puerto)
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache
from typing import Sequence

from .application.review import ReconcileOptions
from .application.usecases import ReviewDocumentUseCase
from .crosscutting.config import get_settings
from .domain.services import CompletionService
from .infrastructure.prompts import get_prompt_loader, preview_prompt
from .infrastructure.services import (
    FakeCompletionService,
    GoogleCompletionService,
    OpenRouterCompletionService,
)


# =============================================================================
# Servicios externos
# =============================================================================
@lru_cache(maxsize=1)
def get_completion_service() -> CompletionService:
    """Proveedor de completions según settings (fake en test/dev si está habilitado)."""
    settings = get_settings()
    provider = settings.effective_provider()
    if provider == "fake":
        return FakeCompletionService()
    if provider == "google":
        return GoogleCompletionService(
            settings.google_api_key,
            temperature=settings.llm_temperature,
            max_output_tokens=settings.llm_max_output_tokens,
        )
    return OpenRouterCompletionService(
        settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        temperature=settings.llm_temperature,
        max_output_tokens=settings.llm_max_output_tokens,
    )


# =============================================================================
# Reconciliación / prompts
# =============================================================================
@lru_cache(maxsize=1)
def get_reconcile_options() -> ReconcileOptions:
    settings = get_settings()
    return ReconcileOptions(
        trim_min_source_chars=settings.trim_min_source_chars,
        trim_max_diff_chars=settings.trim_max_diff_chars,
        trim_expand_cap=settings.trim_expand_cap,
        trim_min_chars=settings.trim_min_chars,
        trim_max_chars=settings.trim_max_chars,
        trim_min_shrink_ratio=settings.trim_min_shrink_ratio,
        coalesce_max_span=settings.coalesce_max_span,
    )


def build_system_prompt(rules: Sequence[str], custom_prompt: str) -> str:
    """SystemPromptBuilder con el template versionado de settings."""
    return preview_prompt(rules, custom_prompt, loader=get_prompt_loader())


# =============================================================================
# Use cases
# =============================================================================
def get_review_document_use_case() -> ReviewDocumentUseCase:
    settings = get_settings()
    return ReviewDocumentUseCase(
        completion_service=get_completion_service(),
        system_prompt_builder=build_system_prompt,
        default_model=settings.default_model,
        options=get_reconcile_options(),
        thinking_models=settings.get_thinking_models(),
        max_document_chars=settings.max_document_chars,
        default_chunk_size=settings.default_chunk_size,
        chunk_timeout_seconds=settings.chunk_timeout_seconds,
        thinking_chunk_timeout_seconds=settings.thinking_chunk_timeout_seconds,
        max_concurrency=settings.max_chunk_concurrency,
    )
