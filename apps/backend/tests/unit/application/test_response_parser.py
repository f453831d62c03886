"""
Name: Response Parser Unit Tests

Responsibilities:
  - Payload extraction, truncation repair and trailing-comma repair
  - Field alias resolution and type coercion
  - Non-fatal advisories (skipped items, empty content, no array)
  - Anchoring against the chunk text when a reference is given
"""

import pytest
from conftest import model_reply

from docreview.application.review.response_parser import (
    EMPTY_CONTENT_MESSAGE,
    FIELD_ALIASES,
    parse_review_response,
)
from docreview.domain.entities import SuggestionStatus, SuggestionType

pytestmark = pytest.mark.unit

DOC = "今天天气很好，我们去公迀玩。"
TYPO_AT = DOC.index("公迀")


class TestHappyPath:
    """Well-formed replies."""

    def test_correct_offset_is_kept(self):
        reply = model_reply(
            [
                {
                    "offset": TYPO_AT,
                    "length": 2,
                    "type": "error",
                    "original": "公迀",
                    "suggestion": "公园",
                    "reason": "错别字",
                }
            ]
        )

        result = parse_review_response(reply, DOC)

        assert result.parse_error is None
        assert result.raw_response == reply
        [s] = result.suggestions
        assert (s.offset, s.length) == (TYPO_AT, 2)
        assert (s.original, s.suggestion) == ("公迀", "公园")
        assert s.type is SuggestionType.ERROR
        assert s.status is SuggestionStatus.PENDING
        assert DOC[s.offset : s.end] == s.original

    def test_wrong_offset_is_corrected_by_reference(self):
        reply = model_reply([{"offset": 0, "original": "公迀", "suggestion": "公园"}])

        [s] = parse_review_response(reply, DOC).suggestions

        assert s.offset == TYPO_AT

    def test_ids_are_deterministic(self):
        reply = model_reply(
            [
                {"offset": 3, "original": "气很", "suggestion": "气真"},
                {"offset": TYPO_AT, "original": "公迀", "suggestion": "公园"},
            ]
        )

        first = [s.id for s in parse_review_response(reply).suggestions]
        second = [s.id for s in parse_review_response(reply).suggestions]

        assert first == second == ["suggestion-0-3", f"suggestion-1-{TYPO_AT}"]

    def test_markdown_fences_are_ignored(self):
        reply = "```json\n" + model_reply([{"original": "公迀", "suggestion": "公园"}]) + "\n```"

        result = parse_review_response(reply, DOC)

        assert result.parse_error is None
        assert result.suggestions[0].offset == TYPO_AT

    def test_empty_array_means_no_findings(self):
        result = parse_review_response("[]")

        assert result.suggestions == []
        assert result.parse_error is None


class TestFieldAliases:
    """Ordered alias table per field."""

    def test_alias_table_order(self):
        assert FIELD_ALIASES["offset"].keys == ("offset", "location")
        assert FIELD_ALIASES["original"].keys == ("original", "text")
        assert FIELD_ALIASES["suggestion"].keys == ("suggestion", "replacement", "fix")
        assert FIELD_ALIASES["reason"].keys == ("reason", "explanation", "description")
        assert FIELD_ALIASES["ruleCategory"].keys == ("ruleCategory", "category")

    def test_aliases_are_resolved(self):
        reply = model_reply(
            [
                {
                    "location": 3,
                    "text": "气很",
                    "replacement": "气真",
                    "explanation": "用词",
                    "category": "style",
                    "type": "bogus",
                }
            ]
        )

        [s] = parse_review_response(reply, DOC).suggestions

        assert s.offset == 3
        assert s.original == "气很"
        assert s.suggestion == "气真"
        assert s.reason == "用词"
        assert s.rule_category == "style"
        assert s.type is SuggestionType.SUGGESTION

    def test_primary_key_wins_over_alias(self):
        reply = model_reply([{"suggestion": "A", "fix": "B", "original": "x"}])

        [s] = parse_review_response(reply).suggestions

        assert s.suggestion == "A"

    def test_boolean_offset_is_not_a_number(self):
        reply = model_reply([{"offset": True, "original": "公迀", "suggestion": "公园"}])

        [s] = parse_review_response(reply).suggestions

        assert s.offset == -1

    def test_length_defaults_to_original_length(self):
        reply = model_reply([{"offset": 1, "original": "天天气", "suggestion": "天气"}])

        [s] = parse_review_response(reply).suggestions

        assert s.length == 3


class TestRecovery:
    """Truncation, trailing commas and skipped items."""

    def test_truncated_array_is_closed_after_last_object(self):
        reply = '[{"offset":1,"original":"天天","suggestion":"天"},{"offset":5,"orig'

        result = parse_review_response(reply)

        assert result.parse_error is None
        assert [s.original for s in result.suggestions] == ["天天"]

    def test_truncated_array_drops_dangling_nested_element(self):
        reply = '[{"original":"a","suggestion":"b"},{"original":"c","x":{"y":1}'

        result = parse_review_response(reply)

        assert result.parse_error is None
        assert [s.original for s in result.suggestions] == ["a"]

    def test_deeply_nested_payload_is_a_format_error(self):
        reply = "[" * 100_000 + "]" * 100_000

        result = parse_review_response(reply, DOC)

        assert result.suggestions == []
        assert result.parse_error.startswith("JSON 解析失败")

    def test_truncated_without_any_object_is_unrecoverable(self):
        result = parse_review_response('[{"offset":1,"orig')

        assert result.suggestions == []
        assert "截断" in result.parse_error

    def test_trailing_commas_are_repaired(self):
        reply = '[{"original":"公迀","suggestion":"公园",},]'

        result = parse_review_response(reply)

        assert result.parse_error is None
        assert result.suggestions[0].suggestion == "公园"

    def test_invalid_json_reports_error_without_guessing(self):
        result = parse_review_response("[{oops}]")

        assert result.suggestions == []
        assert result.parse_error.startswith("JSON 解析失败")

    def test_skipped_items_produce_advisory(self):
        reply = model_reply(
            [{"original": "公迀", "suggestion": "公园"}, 42, {"reason": "no text"}]
        )

        result = parse_review_response(reply)

        assert len(result.suggestions) == 1
        assert result.parse_error == "3 条结果中有 2 条格式不符被跳过"


class TestUnusableReplies:
    """Replies with nothing to salvage."""

    @pytest.mark.parametrize("reply", ["", "   \n\t"])
    def test_empty_content(self, reply):
        result = parse_review_response(reply)

        assert result.suggestions == []
        assert result.parse_error == EMPTY_CONTENT_MESSAGE

    def test_reply_without_array_includes_snippet(self):
        reply = "抱歉，我无法完成这个任务。"

        result = parse_review_response(reply)

        assert result.suggestions == []
        assert "无法在 AI 返回中找到 JSON 数组" in result.parse_error
        assert reply in result.parse_error
