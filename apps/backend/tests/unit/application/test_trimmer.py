"""
Name: Suggestion Trimmer Unit Tests

Responsibilities:
  - Shrink oversized spans to the clause containing the edit
  - Respect the expansion cap and the length/shrink bounds
  - Leave short, identical, large-diff and unanchored suggestions untouched
"""

from dataclasses import replace

import pytest
from conftest import make_suggestion

from docreview.application.review.options import ReconcileOptions
from docreview.application.review.trimmer import trim_suggestion, trim_suggestions

pytestmark = pytest.mark.unit

A = "第一部分的内容比较长需要足够多的文字来填充，"
B = "第二部分包含一个错别字公迀需要修改，"
C = "第三部分同样是为了凑够长度而写的一些文字。"
D = "最后再补充一句。"
PARAGRAPH = A + B + C + D


def _paragraph_suggestion(offset=0):
    fixed = PARAGRAPH.replace("公迀", "公园")
    return make_suggestion(PARAGRAPH, offset, fixed, reason="错别字")


class TestTrimSuggestion:
    def test_trims_to_enclosing_clause(self):
        s = _paragraph_suggestion(offset=7)

        trimmed = trim_suggestion(s)

        assert trimmed.original == B
        assert trimmed.suggestion == B.replace("公迀", "公园")
        assert trimmed.offset == 7 + len(A)
        assert trimmed.length == len(B)
        assert trimmed.reason == "错别字"
        assert trimmed.id == s.id

    def test_input_is_not_mutated(self):
        s = _paragraph_suggestion()

        trim_suggestion(s)

        assert s.original == PARAGRAPH

    def test_expansion_is_capped_without_punctuation(self):
        original = "甲" * 35 + "乙" + "甲" * 35
        s = make_suggestion(original, 0, "甲" * 35 + "丙" + "甲" * 35)

        trimmed = trim_suggestion(s)

        assert trimmed.original == original[15:56]
        assert trimmed.suggestion == "甲" * 20 + "丙" + "甲" * 20
        assert trimmed.offset == 15

    def test_result_longer_than_max_is_rejected(self):
        original = "甲" * 35 + "乙" + "甲" * 35
        s = make_suggestion(original, 0, "甲" * 35 + "丙" + "甲" * 35)

        assert trim_suggestion(s, ReconcileOptions(trim_expand_cap=100)) is s

    def test_insufficient_shrink_is_rejected(self):
        original = "甲" * 35 + "乙" + "甲" * 35
        s = make_suggestion(original, 0, "甲" * 35 + "丙" + "甲" * 35)

        assert trim_suggestion(s, ReconcileOptions(trim_min_shrink_ratio=0.5)) is s

    def test_short_source_is_untouched(self):
        s = make_suggestion(B, 0, B.replace("公迀", "公园"))

        assert trim_suggestion(s) is s

    def test_identical_text_is_untouched(self):
        s = make_suggestion(PARAGRAPH, 0, PARAGRAPH)

        assert trim_suggestion(s) is s

    def test_large_diff_is_untouched(self):
        s = make_suggestion("甲" * 70, 0, "乙" * 70)

        assert trim_suggestion(s) is s


class TestTrimSuggestions:
    def test_only_anchored_suggestions_are_trimmed(self):
        document = "前言。" + PARAGRAPH
        anchored = _paragraph_suggestion(offset=3)
        stale = replace(_paragraph_suggestion(), id="stale", offset=-1)

        out = trim_suggestions([anchored, stale], document)

        assert out[0].original == B
        assert document[out[0].offset : out[0].end] == B
        assert out[1] is stale
