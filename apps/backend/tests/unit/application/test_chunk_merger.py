"""
Name: Chunk Merger Unit Tests

Responsibilities:
  - Chunk-relative offsets become document-relative
  - Stable ordering by offset and (offset, original) dedup
  - Inputs are never mutated
"""

import pytest
from conftest import make_suggestion

from docreview.application.review.chunk_merger import merge_chunk_results
from docreview.domain.entities import ChunkResult, DocumentChunk

pytestmark = pytest.mark.unit


def _result(start, text, index, *suggestions):
    return ChunkResult(
        chunk=DocumentChunk(start=start, text=text, index=index),
        suggestions=list(suggestions),
    )


class TestMergeChunkResults:
    def test_offsets_are_translated_to_document(self):
        results = [
            _result(0, "aaa\nbbb", 0, make_suggestion("bbb", 4)),
            _result(8, "ccc", 1, make_suggestion("cc", 1)),
        ]

        merged = merge_chunk_results(results)

        assert [(s.offset, s.original) for s in merged] == [(4, "bbb"), (9, "cc")]

    def test_output_sorted_by_offset(self):
        results = [
            _result(10, "x" * 10, 1, make_suggestion("x", 5)),
            _result(0, "y" * 10, 0, make_suggestion("y", 8), make_suggestion("y", 1)),
        ]

        merged = merge_chunk_results(results)

        assert [s.offset for s in merged] == [1, 8, 15]

    def test_duplicates_are_dropped_keeping_first(self):
        results = [
            _result(0, "同一句话", 0, make_suggestion("同一", 0, "统一", id="first")),
            _result(0, "同一句话", 1, make_suggestion("同一", 0, "同意", id="second")),
        ]

        merged = merge_chunk_results(results)

        assert [s.id for s in merged] == ["first"]

    def test_same_offset_different_original_keeps_both_in_chunk_order(self):
        results = [
            _result(0, "abcdef", 0, make_suggestion("abc", 0, id="wide")),
            _result(0, "abcdef", 1, make_suggestion("ab", 0, id="narrow")),
        ]

        merged = merge_chunk_results(results)

        assert [s.id for s in merged] == ["wide", "narrow"]

    def test_inputs_are_not_mutated(self):
        s = make_suggestion("ccc", 0)
        results = [_result(8, "ccc", 1, s)]

        merged = merge_chunk_results(results)

        assert s.offset == 0
        assert merged[0].offset == 8
        assert merged[0] is not s

    def test_merge_is_idempotent(self):
        results = [
            _result(0, "aaa\nbbb", 0, make_suggestion("aaa", 0), make_suggestion("aaa", 0)),
            _result(8, "ccc", 1, make_suggestion("ccc", 0)),
        ]

        once = merge_chunk_results(results)
        twice = merge_chunk_results([_result(0, "aaa\nbbb\nccc", 0, *once)])

        assert [(s.offset, s.original) for s in twice] == [
            (s.offset, s.original) for s in once
        ]

    def test_empty_input(self):
        assert merge_chunk_results([]) == []
