"""
===============================================================================
CRC CARD — application/review/trimmer.py
===============================================================================

Componente:
  Suggestion Trimmer

Responsabilidades:
  - Achicar sugerencias "sobredimensionadas" (el modelo marcó un párrafo entero
    para cambiar dos caracteres) a la cláusula mínima que contiene la edición.
  - Cortar en puntuación de oración; si no hay, expandir como máximo N chars.
  - Rechazar recortes que no achican de verdad o que quedan fuera de rango.

Colaboradores:
  - application/review/options.py (umbrales)
  - application/review/reconciler.py

Reglas:
  - Solo se recortan sugerencias ancladas en el documento (span == original).
  - Nunca se modifica la sugerencia de entrada: se devuelve una nueva.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Final, List, Optional

from ...domain.entities import Suggestion
from .options import ReconcileOptions

SENTENCE_PUNCTUATION: Final[frozenset[str]] = frozenset("，。；！？、,.;!?")


def _common_prefix(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    i = 0
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def _common_suffix(a: str, b: str, prefix: int) -> int:
    # Acotado para que prefix + suffix <= min(len(a), len(b)).
    limit = min(len(a), len(b)) - prefix
    i = 0
    while i < limit and a[-1 - i] == b[-1 - i]:
        i += 1
    return i


def _expand_left(original: str, diff_start: int, cap: int) -> int:
    floor = max(0, diff_start - cap)
    for i in range(diff_start - 1, floor - 1, -1):
        if original[i] in SENTENCE_PUNCTUATION:
            return i + 1
    return floor


def _expand_right(original: str, diff_end: int, cap: int) -> int:
    ceiling = min(len(original), diff_end + cap)
    for j in range(diff_end, ceiling):
        if original[j] in SENTENCE_PUNCTUATION:
            return j + 1
    return ceiling


def trim_suggestion(
    suggestion: Suggestion, options: Optional[ReconcileOptions] = None
) -> Suggestion:
    """
    Devuelve la sugerencia recortada, o la misma instancia si no corresponde.

    Pasos:
      1) prefijo/sufijo común entre original y suggestion
      2) diff vacío o demasiado grande -> sin cambios
      3) expandir hasta puntuación (con tope) en ambos lados
      4) validar largo final y encogimiento real
    """
    opts = options or ReconcileOptions()
    original = suggestion.original
    replacement = suggestion.suggestion

    if len(original) <= opts.trim_min_source_chars:
        return suggestion

    prefix = _common_prefix(original, replacement)
    suffix = _common_suffix(original, replacement, prefix)

    diff_orig = len(original) - prefix - suffix
    diff_sugg = len(replacement) - prefix - suffix
    if diff_orig == 0 and diff_sugg == 0:
        return suggestion
    if diff_orig > opts.trim_max_diff_chars or diff_sugg > opts.trim_max_diff_chars:
        return suggestion

    trim_start = _expand_left(original, prefix, opts.trim_expand_cap)
    trim_end = _expand_right(original, len(original) - suffix, opts.trim_expand_cap)

    new_original = original[trim_start:trim_end]
    if not opts.trim_min_chars <= len(new_original) <= opts.trim_max_chars:
        return suggestion
    if len(new_original) >= opts.trim_min_shrink_ratio * len(original):
        return suggestion

    new_replacement = replacement[trim_start : len(replacement) - (len(original) - trim_end)]

    return replace(
        suggestion,
        offset=suggestion.offset + trim_start,
        length=len(new_original),
        original=new_original,
        suggestion=new_replacement,
    )


def trim_suggestions(
    suggestions: List[Suggestion],
    document: str,
    options: Optional[ReconcileOptions] = None,
) -> List[Suggestion]:
    """Recorta cada sugerencia anclada en `document`; el resto pasa intacto."""
    return [
        trim_suggestion(s, options) if s.is_anchored_in(document) else s
        for s in suggestions
    ]
