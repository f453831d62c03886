# apps/backend/docreview/crosscutting/timing.py
"""
===============================================================================
MÓDULO: Timing utilities (Timer + StageTimings)
===============================================================================

Objetivo
--------
Medir las etapas de una revisión (chunking / completions / reconcile) para
logs y métricas, sin dependencias externas.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componentes:
  - Timer
  - StageTimings

Colaboradores:
  - application/usecases/review_document.py (etapas + latencia por chunk)
===============================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Timer:
    """Cronómetro con perf_counter; uso manual o como context manager."""

    _start_time: Optional[float] = field(default=None, repr=False)
    _end_time: Optional[float] = field(default=None, repr=False)

    def start(self) -> "Timer":
        self._start_time = time.perf_counter()
        self._end_time = None
        return self

    def stop(self) -> "Timer":
        if self._start_time is None:
            raise RuntimeError("Timer no iniciado")
        self._end_time = time.perf_counter()
        return self

    @property
    def elapsed_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        return (self._end_time or time.perf_counter()) - self._start_time

    @property
    def elapsed_ms(self) -> float:
        return round(self.elapsed_seconds * 1000, 2)

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()


@dataclass
class StageTimings:
    """
    Tiempos por etapa de la revisión.

    `to_dict()` -> {"{stage}_ms": ..., "total_ms": ...} (listo para `extra=`).
    """

    _stages: dict[str, float] = field(default_factory=dict)
    _total: Timer = field(default_factory=Timer)

    def __post_init__(self) -> None:
        self._total.start()

    def measure(self, stage: str) -> "_StageTimer":
        return _StageTimer(stage, self)

    def record(self, stage: str, elapsed_ms: float) -> None:
        self._stages[stage] = elapsed_ms

    def to_dict(self) -> dict[str, float]:
        result = {f"{k}_ms": v for k, v in self._stages.items()}
        result["total_ms"] = self._total.elapsed_ms
        return result


class _StageTimer(Timer):
    def __init__(self, stage: str, parent: StageTimings):
        super().__init__()
        self._stage = stage
        self._parent = parent

    def __exit__(self, *args) -> None:
        super().__exit__(*args)
        self._parent.record(self._stage, self.elapsed_ms)
