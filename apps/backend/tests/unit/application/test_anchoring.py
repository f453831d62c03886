"""
Name: Offset Anchoring Unit Tests

Responsibilities:
  - Fast path when the claimed offset is already right
  - Leftmost non-conflicting occurrence otherwise
  - Unresolved suggestions keep their previous offset
"""

import pytest
from conftest import make_suggestion

from docreview.application.review.anchoring import (
    UNRESOLVED,
    anchor_suggestion,
    anchor_suggestions,
    resolve_offset,
)
from docreview.crosscutting.exceptions import AnchorError
from docreview.domain.entities import UsedRange

pytestmark = pytest.mark.unit

TEXT = "公迀和公迀"


class TestResolveOffset:
    """R: resolve_offset(reference, original, offset, used) -> int."""

    def test_fast_path_keeps_claimed_offset(self):
        assert resolve_offset(TEXT, "公迀", 3, []) == 3

    def test_wrong_offset_falls_back_to_first_occurrence(self):
        assert resolve_offset(TEXT, "公迀", 1, []) == 0

    def test_out_of_bounds_offset_falls_back(self):
        assert resolve_offset(TEXT, "公迀", 99, []) == 0
        assert resolve_offset(TEXT, "公迀", -1, []) == 0

    def test_used_range_pushes_to_next_occurrence(self):
        assert resolve_offset(TEXT, "公迀", 0, [UsedRange(0, 2)]) == 3

    def test_all_occurrences_used_is_unresolved(self):
        used = [UsedRange(0, 2), UsedRange(3, 5)]

        assert resolve_offset(TEXT, "公迀", 0, used) == UNRESOLVED

    def test_missing_text_is_unresolved(self):
        assert resolve_offset(TEXT, "公园", 0, []) == UNRESOLVED

    def test_partial_overlap_counts_as_conflict(self):
        assert resolve_offset("abcabc", "bc", 1, [UsedRange(2, 3)]) == 4


class TestAnchorSuggestion:
    def test_updates_offset_length_and_claims_range(self):
        used = []
        s = make_suggestion("和公", 0)

        anchor_suggestion(TEXT, s, used)

        assert (s.offset, s.length) == (2, 2)
        assert used == [UsedRange(2, 4)]

    def test_raises_when_unresolved(self):
        s = make_suggestion("不存在", 0)

        with pytest.raises(AnchorError):
            anchor_suggestion(TEXT, s, [])


class TestAnchorSuggestions:
    """R: One pass with fresh used ranges, in the order received."""

    def test_identical_claims_spread_over_occurrences(self):
        first = make_suggestion("公迀", 0, "公园", id="a")
        second = make_suggestion("公迀", 0, "公园", id="b")

        unresolved = anchor_suggestions(TEXT, [first, second])

        assert unresolved == 0
        assert (first.offset, second.offset) == (0, 3)

    def test_unresolved_keeps_stale_offset(self):
        s = make_suggestion("不存在", 7)

        unresolved = anchor_suggestions(TEXT, [s])

        assert unresolved == 1
        assert s.offset == 7
        assert not s.is_anchored_in(TEXT)

    def test_empty_original_is_skipped(self):
        s = make_suggestion("", 4, "补充")

        unresolved = anchor_suggestions(TEXT, [s])

        assert unresolved == 0
        assert s.offset == 4

    def test_anchored_spans_match_reference(self):
        items = [make_suggestion("公迀", 9), make_suggestion("和", 0), make_suggestion("公迀", 9)]

        anchor_suggestions(TEXT, items)

        for s in items:
            assert TEXT[s.offset : s.end] == s.original
