"""
Name: Chunker Unit Tests

Responsibilities:
  - Verify single-chunk behavior (chunk_size <= 0 or short text)
  - Verify paragraph-aligned splitting and start offsets
  - Verify oversized paragraphs are never split
"""

import pytest

from docreview.application.review.chunker import chunk_document

pytestmark = pytest.mark.unit


def _assert_covers(text, chunks):
    for chunk in chunks:
        assert text[chunk.start : chunk.end] == chunk.text
    assert "\n".join(c.text for c in chunks) == text
    assert [c.index for c in chunks] == list(range(len(chunks)))


class TestSingleChunk:
    """chunk_size <= 0 or short documents produce exactly one chunk."""

    @pytest.mark.parametrize("size", [0, -1, -500])
    def test_non_positive_size_returns_whole_document(self, size):
        text = "第一段。\n第二段。\n第三段。"

        chunks = chunk_document(text, size)

        assert len(chunks) == 1
        assert chunks[0].start == 0
        assert chunks[0].text == text
        assert chunks[0].index == 0

    def test_text_not_longer_than_size_is_single_chunk(self):
        text = "短文本\n两段"

        chunks = chunk_document(text, len(text))

        assert [(c.start, c.text) for c in chunks] == [(0, text)]

    def test_empty_document(self):
        chunks = chunk_document("", 100)

        assert len(chunks) == 1
        assert chunks[0].text == ""


class TestParagraphSplitting:
    """Paragraphs are accumulated until the next one would overflow."""

    def test_flushes_when_next_paragraph_overflows(self):
        text = "aaa\nbbb\nccc"

        chunks = chunk_document(text, 7)

        assert [(c.start, c.text) for c in chunks] == [(0, "aaa\nbbb"), (8, "ccc")]
        _assert_covers(text, chunks)

    def test_oversized_paragraph_becomes_its_own_chunk(self):
        text = "a" * 20 + "\nbb"

        chunks = chunk_document(text, 5)

        assert [c.text for c in chunks] == ["a" * 20, "bb"]
        assert chunks[1].start == 21
        _assert_covers(text, chunks)

    def test_empty_lines_are_preserved(self):
        text = "aaaa\n\nbbbb"

        chunks = chunk_document(text, 4)

        _assert_covers(text, chunks)

    def test_chunk_offsets_map_back_to_document(self):
        paragraphs = [f"第{i}段内容，用来测试分块。" for i in range(12)]
        text = "\n".join(paragraphs)

        chunks = chunk_document(text, 40)

        assert len(chunks) > 1
        _assert_covers(text, chunks)
        assert all(not c.text.startswith("\n") for c in chunks)
