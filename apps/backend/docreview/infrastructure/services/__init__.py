"""
Infrastructure Services (Infrastructure Layer)

Qué es este módulo
------------------
Facade/Barrel del paquete `infrastructure.services`: expone los adapters
concretos del puerto `CompletionService` y las utilidades de retry, para que
el composition root importe desde un único lugar.

Patrones
--------
- **Adapter:** `OpenRouterCompletionService`, `GoogleCompletionService`.
- **Test Double / Fake:** `FakeCompletionService` para tests/desarrollo.
- **Retry / Resilience (Decorator):** `create_retry_decorator` (tenacity).
"""

from .llm import (
    FakeCall,
    FakeCompletionService,
    GoogleCompletionService,
    OpenRouterCompletionService,
)
from .retry import (
    PERMANENT_HTTP_CODES,
    TRANSIENT_HTTP_CODES,
    create_retry_decorator,
    get_http_status_code,
    is_transient_error,
    no_retry,
)

__all__ = [
    "FakeCall",
    "FakeCompletionService",
    "GoogleCompletionService",
    "OpenRouterCompletionService",
    "PERMANENT_HTTP_CODES",
    "TRANSIENT_HTTP_CODES",
    "create_retry_decorator",
    "get_http_status_code",
    "is_transient_error",
    "no_retry",
]
