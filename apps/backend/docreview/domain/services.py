"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato del proveedor de completions.
    - Proteger a application del transporte (HTTP, SDK) y del proveedor.

Colaboradores:
    - infrastructure/services/llm/*: implementaciones concretas.
    - application/usecases/review_document.py: consume este puerto.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Los fallos se comunican con ProviderError (crosscutting/exceptions.py).
===============================================================================
"""

from __future__ import annotations

from typing import Protocol


class CompletionService(Protocol):
    """Contrato para una completion de chat (system + user -> texto)."""

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
        model_id: str,
        timeout_seconds: float,
    ) -> str:
        """
        Devuelve el texto generado.

        Raises:
            ProviderError: timeout / auth / quota / rate-limit / respuesta vacía.
        """
        ...
