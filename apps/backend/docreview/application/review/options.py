"""
Name: Reconciliation Options

Responsibilities:
  - Hold the empirical thresholds used by the Trimmer and the Coalescer
  - Keep application code free of Settings (the container maps env -> options)

Collaborators:
  - container.py: builds ReconcileOptions from Settings
  - trimmer.py / coalescer.py: read the thresholds
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReconcileOptions:
    # Trimmer
    trim_min_source_chars: int = 60
    trim_max_diff_chars: int = 40
    trim_expand_cap: int = 20
    trim_min_chars: int = 5
    trim_max_chars: int = 60
    trim_min_shrink_ratio: float = 0.8
    # Coalescer
    coalesce_max_span: int = 80
