"""
Name: OpenRouter Completion Service (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.CompletionService` sobre la API
OpenAI-compatible de OpenRouter (`POST {base_url}/chat/completions`), usando
`httpx.AsyncClient`.

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo (OpenRouter)

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: OpenRouterCompletionService
Responsibilities:
  - Armar el body (model, messages[system,user], temperature, max_tokens)
  - Mapear status HTTP / timeouts a ProviderError tipado
  - Detectar respuestas vacías (incluye finish_reason == "length")
  - Reintentar errores transitorios (tenacity vía retry.py)
Collaborators:
  - httpx.AsyncClient
  - crosscutting.exceptions.ProviderError
  - retry.create_retry_decorator
Constraints:
  - La API key vive en el servidor (Settings); nunca viene del cliente
  - El timeout por llamada lo define el use case (por clase de modelo)
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ....crosscutting.exceptions import ProviderError
from ....crosscutting.logger import logger
from ....domain.services import CompletionService
from ..retry import create_retry_decorator

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterCompletionService(CompletionService):
    """R: OpenRouter (OpenAI-compatible) implementation of CompletionService."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.3,
        max_output_tokens: int = 16384,
        client: Optional[httpx.AsyncClient] = None,
        retry_decorator=None,
    ) -> None:
        """
        Args:
            api_key: OpenRouter API key (desde Settings)
            base_url: endpoint base OpenAI-compatible
            client: cliente httpx preconstruido (tests: httpx.MockTransport)
            retry_decorator: decorator tenacity (inyectable para tests)
        """
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._client = client or httpx.AsyncClient()

        decorator = retry_decorator or create_retry_decorator()
        self._send = decorator(self._post_completion)

        logger.info(
            "OpenRouterCompletionService initialized",
            extra={"base_url": self._base_url, "has_api_key": bool(self._api_key)},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        model_id: str,
        timeout_seconds: float,
    ) -> str:
        if not self._api_key:
            raise ProviderError.missing_api_key()

        body = {
            "model": model_id,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_output_tokens,
        }

        payload = await self._send(body, timeout_seconds)
        content, finish_reason = _extract_content(payload)

        if not content.strip():
            logger.warning(
                "OpenRouter returned empty content",
                extra={"model_id": model_id, "finish_reason": finish_reason},
            )
            raise ProviderError.empty_response(finish_reason)

        return content

    async def _post_completion(self, body: dict[str, Any], timeout_seconds: float) -> dict:
        try:
            response = await self._client.post(
                f"{self._base_url}/chat/completions",
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise ProviderError.timeout(timeout_seconds, original_error=exc) from exc
        except httpx.TransportError as exc:
            raise ProviderError.from_status(503, str(exc), original_error=exc) from exc

        if response.status_code >= 400:
            logger.warning(
                "OpenRouter request failed",
                extra={"status": response.status_code, "model_id": body.get("model")},
            )
            raise ProviderError.from_status(response.status_code, _error_detail(response))

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError.from_status(
                502, "invalid JSON from provider", original_error=exc
            ) from exc


def _extract_content(payload: Any) -> tuple[str, Optional[str]]:
    """choices[0].message.content + finish_reason (best-effort)."""
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices:
        return "", None
    first = choices[0] or {}
    message = first.get("message") or {}
    content = message.get("content")
    return (content if isinstance(content, str) else ""), first.get("finish_reason")


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return response.text
