"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (no .env, fake provider)
  - Provide reusable builders for suggestions, chunks and model replies
  - Provide a ReviewDocumentUseCase wired to the deterministic fake provider

Collaborators:
  - pytest: Test framework
  - docreview.domain: Domain entities
  - docreview.infrastructure.services.FakeCompletionService

Notes:
  - Fixtures are auto-discovered by pytest
  - Env vars are set BEFORE importing docreview (Settings is cached)
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("FAKE_LLM", "1")
os.environ.setdefault("LOG_JSON", "1")

from docreview.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from docreview.application.usecases import ReviewDocumentUseCase  # noqa: E402
from docreview.domain.entities import (  # noqa: E402
    DocumentChunk,
    Suggestion,
    SuggestionType,
)
from docreview.infrastructure.services import FakeCompletionService  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Builders
# ============================================================================


def make_suggestion(
    original: str,
    offset: int,
    suggestion: Optional[str] = None,
    *,
    type: SuggestionType = SuggestionType.SUGGESTION,
    reason: str = "",
    id: Optional[str] = None,
) -> Suggestion:
    """R: Suggestion anchored at `offset` (length = len(original))."""
    return Suggestion(
        id=id or f"s-{offset}-{original[:4]}",
        offset=offset,
        length=len(original),
        type=type,
        original=original,
        suggestion=original if suggestion is None else suggestion,
        reason=reason,
    )


def model_reply(items: List[Dict[str, Any]]) -> str:
    """R: JSON array as the model would return it."""
    return json.dumps(items, ensure_ascii=False)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sample_document() -> str:
    return "今天天气很好，我们去公迀玩。"


@pytest.fixture
def sample_chunk(sample_document: str) -> DocumentChunk:
    return DocumentChunk(start=0, text=sample_document, index=0)


@pytest.fixture
def fake_completion() -> FakeCompletionService:
    return FakeCompletionService()


@pytest.fixture
def build_use_case():
    """R: Factory: use case over a given completion service with test-friendly limits."""

    def _build(completion_service, **overrides) -> ReviewDocumentUseCase:
        params = dict(
            default_model="test/model",
            thinking_models=frozenset({"test/thinker"}),
            max_document_chars=2_000,
            default_chunk_size=0,
            chunk_timeout_seconds=1.0,
            thinking_chunk_timeout_seconds=2.0,
            max_concurrency=4,
        )
        params.update(overrides)
        return ReviewDocumentUseCase(
            completion_service=completion_service,
            system_prompt_builder=lambda rules, custom: "SYSTEM:" + ",".join(rules),
            **params,
        )

    return _build
