"""
Completion provider adapters (OpenRouter / Google GenAI / Fake).
"""

from .fake_completion_service import FakeCall, FakeCompletionService
from .google_completion_service import GoogleCompletionService
from .openrouter_completion_service import OpenRouterCompletionService

__all__ = [
    "FakeCall",
    "FakeCompletionService",
    "GoogleCompletionService",
    "OpenRouterCompletionService",
]
