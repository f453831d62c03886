"""
Name: Rule Catalog and Scene Detection Unit Tests

Responsibilities:
  - Static catalog integrity (rules, scene packs, models, labels)
  - Keyword-based scene pack recommendation
"""

import pytest

from docreview.domain.rules import (
    AI_MODELS,
    CATEGORY_LABELS,
    CUSTOM_RULE_ID,
    DETECTION_SAMPLE_CHARS,
    RULE_TEMPLATES,
    SCENE_PACKS,
    RuleCategory,
    detect_scene_pack,
    get_rule_template,
    get_rules_by_category,
    get_scene_pack,
    is_known_rule,
)


@pytest.mark.unit
class TestCatalog:
    def test_rule_ids_are_unique(self):
        ids = [r.id for r in RULE_TEMPLATES]

        assert len(ids) == len(set(ids)) == 15

    def test_every_category_has_rules_and_label(self):
        for category in RuleCategory:
            assert len(get_rules_by_category(category)) >= 3
            assert CATEGORY_LABELS[category]

    def test_scene_packs_reference_known_rules(self):
        assert [p.id for p in SCENE_PACKS] == [
            "daily",
            "official",
            "academic",
            "technical",
            "marketing",
        ]
        for pack in SCENE_PACKS:
            assert all(is_known_rule(rule_id) for rule_id in pack.rule_ids)

    def test_lookups(self):
        assert get_rule_template("typo").name == "错别字检查"
        assert get_rule_template("missing") is None
        assert get_scene_pack("daily").rule_ids[0] == "typo"

    def test_custom_rule_is_known(self):
        assert is_known_rule(CUSTOM_RULE_ID)
        assert not is_known_rule("spelling")

    def test_models_catalog(self):
        assert "anthropic/claude-sonnet-4" in {m.id for m in AI_MODELS}


@pytest.mark.unit
class TestDetectScenePack:
    """R: Keyword presence over the first 2000 chars, threshold 2."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("尊敬的各部门：关于年度总结的通知如下。", "official"),
            ("摘要：本论文研究了……\n参考文献", "academic"),
            ("调用 API 接口前先阅读函数说明。", "technical"),
            ("限时优惠，立即购买！", "marketing"),
        ],
    )
    def test_detects_pack(self, text, expected):
        assert detect_scene_pack(text).id == expected

    def test_single_keyword_is_not_enough(self):
        assert detect_scene_pack("明天放假的通知") is None

    def test_plain_text_has_no_recommendation(self):
        assert detect_scene_pack("今天天气很好，我们去公园玩。") is None

    def test_only_leading_sample_is_considered(self):
        text = "平" * DETECTION_SAMPLE_CHARS + "限时优惠，立即购买！"

        assert detect_scene_pack(text) is None

    def test_tie_goes_to_first_declared(self):
        assert detect_scene_pack("关于通知：限时立即").id == "official"

    def test_repeated_keyword_counts_once(self):
        assert detect_scene_pack("优惠优惠优惠优惠") is None
