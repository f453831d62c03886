"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) — Observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus en un registry propio.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO texto de documentos, NO ids de sugerencias).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - application/usecases/review_document.py: chunks, latencias, reconciliación.

Decisiones de diseño:
    - Registro único global: Prometheus requiere singletons.
    - Normalización de paths: evita explosión de cardinalidad.
===============================================================================
"""

from __future__ import annotations

import re
from typing import Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# -----------------------------------------------------------------------------
# HTTP
# -----------------------------------------------------------------------------

_requests_total = Counter(
    "docreview_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "docreview_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
    registry=_registry,
)

# -----------------------------------------------------------------------------
# Revisión
# -----------------------------------------------------------------------------

_chunk_calls_total = Counter(
    "docreview_chunk_calls_total",
    "Llamadas al proveedor por chunk, por resultado",
    ["outcome"],
    registry=_registry,
)

_completion_latency = Histogram(
    "docreview_completion_latency_seconds",
    "Latencia de una completion por chunk (segundos)",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 55.0, 100.0),
    registry=_registry,
)

_parse_advisories_total = Counter(
    "docreview_parse_advisories_total",
    "Respuestas del modelo que produjeron parseError",
    registry=_registry,
)

_reconcile_total = Counter(
    "docreview_reconcile_suggestions_total",
    "Sugerencias afectadas por etapa de reconciliación",
    ["stage"],
    registry=_registry,
)

_reviews_total = Counter(
    "docreview_reviews_total",
    "Revisiones completas, por resultado",
    ["status"],
    registry=_registry,
)

_chunks_per_review = Histogram(
    "docreview_chunks_per_review",
    "Cantidad de chunks por revisión",
    buckets=(1, 2, 3, 5, 8, 13, 21, 34),
    registry=_registry,
)


# -----------------------------------------------------------------------------
# API pública (helpers de registro)
# -----------------------------------------------------------------------------


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP.

    - endpoint se normaliza para no explotar cardinalidad.
    - status se agrupa por 2xx/4xx/5xx.
    """
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(latency_seconds)


def record_chunk_call(outcome: str, latency_seconds: float | None = None) -> None:
    """outcome: ok | timeout | unauthorized | quota | rate_limited | empty_response | unavailable."""
    _chunk_calls_total.labels(outcome=outcome).inc()
    if latency_seconds is not None:
        _completion_latency.observe(latency_seconds)


def record_parse_advisory(count: int = 1) -> None:
    _parse_advisories_total.inc(count)


def record_reconcile_counts(counts: Mapping[str, int]) -> None:
    """Suma los conteos por etapa (deduplicated, unanchored, trimmed, coalesced)."""
    for stage in ("deduplicated", "unanchored", "trimmed", "coalesced"):
        value = counts.get(stage, 0)
        if value:
            _reconcile_total.labels(stage=stage).inc(value)


def record_review(status: str, chunks: int) -> None:
    _reviews_total.labels(status=status).inc()
    _chunks_per_review.observe(chunks)


# -----------------------------------------------------------------------------
# Helpers internos
# -----------------------------------------------------------------------------


def _normalize_endpoint(path: str) -> str:
    """Normaliza paths para evitar cardinalidad alta (UUIDs / ids numéricos)."""
    path = re.sub(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        "{id}",
        path,
        flags=re.IGNORECASE,
    )
    return re.sub(r"/\d+", "/{id}", path)


def _status_bucket(code: int) -> str:
    """Agrupa status code para baja cardinalidad."""
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


# -----------------------------------------------------------------------------
# /metrics
# -----------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
