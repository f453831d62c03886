"""
Name: Google GenAI Completion Service (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.CompletionService` usando el
cliente asíncrono de Google GenAI (`client.aio.models.generate_content`).
El system prompt viaja como `system_instruction`.

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo (Google GenAI)

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: GoogleCompletionService
Responsibilities:
  - Traducir (system, user, model, timeout) a una llamada del SDK
  - Mapear errores del SDK (APIError.code) y de transporte a ProviderError
  - Detectar respuestas vacías (MAX_TOKENS -> mensaje de truncado)
  - Reintentar errores transitorios (tenacity)
Collaborators:
  - google.genai.Client
  - retry.create_retry_decorator
Constraints:
  - Ids con prefijo de proveedor ("google/gemini-2.5-flash") se normalizan
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from ....crosscutting.exceptions import ProviderError, ProviderErrorKind
from ....crosscutting.logger import logger
from ....domain.services import CompletionService
from ..retry import create_retry_decorator

_MODEL_PREFIX = "google/"


def _normalize_model_id(model_id: str) -> str:
    model = (model_id or "").strip()
    return model[len(_MODEL_PREFIX):] if model.startswith(_MODEL_PREFIX) else model


def _finish_reason(response: Any) -> Optional[str]:
    """R: FinishReason.MAX_TOKENS se reporta como "length" (vocabulario OpenAI)."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    name = getattr(reason, "name", None) or (str(reason) if reason is not None else None)
    return "length" if name == "MAX_TOKENS" else name


class GoogleCompletionService(CompletionService):
    """R: Google GenAI implementation of CompletionService."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        temperature: float = 0.3,
        max_output_tokens: int = 16384,
        retry_decorator=None,
    ) -> None:
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleCompletionService: GOOGLE_API_KEY not configured")
            raise ProviderError(
                "GOOGLE_API_KEY not configured", kind=ProviderErrorKind.UNAUTHORIZED
            )

        self._client = client or genai.Client(api_key=resolved_key)
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

        decorator = retry_decorator or create_retry_decorator()
        self._generate = decorator(self._generate_once)

        logger.info("GoogleCompletionService initialized")

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        model_id: str,
        timeout_seconds: float,
    ) -> str:
        model = _normalize_model_id(model_id)
        response = await self._generate(system_prompt, user_text, model, timeout_seconds)

        text = getattr(response, "text", None) or ""
        if not text.strip():
            finish_reason = _finish_reason(response)
            logger.warning(
                "GoogleCompletionService: empty content",
                extra={"model_id": model, "finish_reason": finish_reason},
            )
            raise ProviderError.empty_response(finish_reason)

        return text

    async def _generate_once(
        self, system_prompt: str, user_text: str, model: str, timeout_seconds: float
    ) -> Any:
        config = genai_types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )
        try:
            return await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model, contents=user_text, config=config
                ),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderError.timeout(timeout_seconds, original_error=exc) from exc
        except genai_errors.APIError as exc:
            logger.warning(
                "GoogleCompletionService: API error",
                extra={"status": exc.code, "model_id": model},
            )
            raise ProviderError.from_status(
                exc.code or 502,
                exc.message or str(exc),
                provider="Google",
                original_error=exc,
            ) from exc
        except Exception as exc:
            # Fallas de transporte (httpx) que el SDK no envuelve.
            logger.error(
                "GoogleCompletionService: generation failed",
                exc_info=True,
                extra={"model_id": model, "error_type": type(exc).__name__},
            )
            raise ProviderError.from_status(
                503,
                str(exc) or type(exc).__name__,
                provider="Google",
                original_error=exc,
            ) from exc
