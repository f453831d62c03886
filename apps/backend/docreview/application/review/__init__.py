"""
Reconciliation pipeline: chunker -> parser (+anchor) -> merge -> global anchor -> trim -> coalesce.
"""

from .anchoring import UNRESOLVED, anchor_suggestion, anchor_suggestions, resolve_offset
from .chunk_merger import merge_chunk_results
from .chunker import chunk_document
from .coalescer import coalesce_suggestions
from .options import ReconcileOptions
from .reconciler import ReconcileReport, reconcile
from .response_parser import EMPTY_CONTENT_MESSAGE, FIELD_ALIASES, parse_review_response
from .trimmer import SENTENCE_PUNCTUATION, trim_suggestion, trim_suggestions

__all__ = [
    "UNRESOLVED",
    "anchor_suggestion",
    "anchor_suggestions",
    "resolve_offset",
    "merge_chunk_results",
    "chunk_document",
    "coalesce_suggestions",
    "ReconcileOptions",
    "ReconcileReport",
    "reconcile",
    "EMPTY_CONTENT_MESSAGE",
    "FIELD_ALIASES",
    "parse_review_response",
    "SENTENCE_PUNCTUATION",
    "trim_suggestion",
    "trim_suggestions",
]
