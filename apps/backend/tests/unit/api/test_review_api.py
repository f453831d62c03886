"""
Name: Review API Unit Tests

Responsibilities:
  - POST /v1/review: camelCase wire shape, ReviewFailure -> RFC7807 mapping
  - POST /v1/review/stream: NDJSON progress + terminal event
  - POST /v1/review/prompt-preview

Notes:
  - The use case is overridden with one wired to FakeCompletionService
"""

import json

import pytest
from conftest import model_reply
from fastapi.testclient import TestClient

from docreview.container import get_review_document_use_case
from docreview.crosscutting.exceptions import ProviderError
from docreview.infrastructure.services import FakeCompletionService
from docreview.main import app

DOC = "今天天气很好，我们去公迀玩。"
TYPO_REPLY = model_reply(
    [
        {
            "offset": DOC.index("公迀"),
            "length": 2,
            "type": "error",
            "original": "公迀",
            "suggestion": "公园",
            "reason": "错别字",
            "ruleCategory": "basic",
        }
    ]
)


@pytest.fixture
def use_fake(build_use_case):
    """R: Install a use case over a scripted fake; returns the fake."""

    def _install(*args, **kwargs) -> FakeCompletionService:
        fake = FakeCompletionService(*args, **kwargs)
        use_case = build_use_case(fake)
        app.dependency_overrides[get_review_document_use_case] = lambda: use_case
        return fake

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


def _ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


@pytest.mark.unit
class TestReviewEndpoint:
    def test_returns_anchored_suggestions(self, client, use_fake):
        use_fake({DOC: TYPO_REPLY})

        response = client.post("/v1/review", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == 200
        body = response.json()
        assert body["parseError"] is None
        assert body["rawResponse"] == TYPO_REPLY
        [s] = body["suggestions"]
        assert s["offset"] == DOC.index("公迀")
        assert s["ruleCategory"] == "basic"
        assert s["status"] == "pending"
        assert DOC[s["offset"] : s["offset"] + s["length"]] == s["original"]

    def test_default_wiring_uses_fake_provider(self, client):
        """R: FAKE_LLM=1 in tests -> container builds the fake provider."""
        response = client.post("/v1/review", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == 200
        assert response.json()["suggestions"] == []

    def test_use_case_validation_is_rfc7807(self, client, use_fake):
        fake = use_fake()

        response = client.post("/v1/review", json={"text": DOC, "rules": []})

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["detail"] == "请至少选择一条审校规则"
        assert {"field": "rules", "msg": "请至少选择一条审校规则"} in body["errors"]
        assert fake.calls == []

    def test_schema_validation(self, client):
        response = client.post("/v1/review", json={"rules": ["typo"]})

        assert response.status_code == 422

    @pytest.mark.parametrize(
        "error, status, code",
        [
            (ProviderError.from_status(401), 401, "UNAUTHORIZED"),
            (ProviderError.from_status(402), 402, "PAYMENT_REQUIRED"),
            (ProviderError.from_status(429), 429, "RATE_LIMITED"),
            (ProviderError.from_status(500), 502, "LLM_ERROR"),
            (ProviderError.timeout(55), 504, "LLM_TIMEOUT"),
        ],
    )
    def test_total_provider_failure_mapping(self, client, use_fake, error, status, code):
        use_fake({DOC: error})

        response = client.post("/v1/review", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == status
        body = response.json()
        assert body["code"] == code
        assert body["detail"] == error.message

    def test_rate_limit_sets_retry_after(self, client, use_fake):
        use_fake({DOC: ProviderError.from_status(429)})

        response = client.post("/v1/review", json={"text": DOC, "rules": ["typo"]})

        assert response.headers["Retry-After"] == "30"

    def test_unexpected_error_is_internal_error(self, client, use_fake):
        use_fake({DOC: RuntimeError("boom")})

        response = client.post("/v1/review", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"


@pytest.mark.unit
class TestReviewStreamEndpoint:
    def test_progress_then_result(self, client, use_fake):
        use_fake({DOC: TYPO_REPLY})

        response = client.post("/v1/review/stream", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        events = _ndjson(response)
        assert events[:2] == [
            {"type": "progress", "current": 0, "total": 1},
            {"type": "progress", "current": 1, "total": 1},
        ]
        assert events[-1]["type"] == "result"
        assert events[-1]["suggestions"][0]["suggestion"] == "公园"

    def test_chunked_document_reports_each_chunk(self, client, use_fake):
        use_fake()
        text = "第一段。\n第二段。\n第三段。"

        response = client.post(
            "/v1/review/stream", json={"text": text, "rules": ["typo"], "chunkSize": 4}
        )

        events = _ndjson(response)
        progress = [e for e in events if e["type"] == "progress"]
        assert [e["current"] for e in progress] == [0, 1, 2, 3]
        assert {e["total"] for e in progress} == {3}

    def test_validation_fails_before_stream_opens(self, client, use_fake):
        use_fake()

        response = client.post("/v1/review/stream", json={"text": "  ", "rules": ["typo"]})

        assert response.status_code == 422
        assert response.json()["detail"] == "文档内容不能为空"

    def test_provider_failure_is_terminal_error_event(self, client, use_fake):
        use_fake({DOC: ProviderError.from_status(402)})

        response = client.post("/v1/review/stream", json={"text": DOC, "rules": ["typo"]})

        assert response.status_code == 200
        last = _ndjson(response)[-1]
        assert last == {"type": "error", "error": ProviderError.from_status(402).message}

    def test_unexpected_error_is_reported_in_stream(self, client, use_fake):
        use_fake({DOC: RuntimeError("boom")})

        response = client.post("/v1/review/stream", json={"text": DOC, "rules": ["typo"]})

        assert _ndjson(response)[-1] == {"type": "error", "error": "审校服务出现未知错误"}


@pytest.mark.unit
class TestPromptPreviewEndpoint:
    def test_renders_system_prompt(self, client):
        response = client.post(
            "/v1/review/prompt-preview",
            json={"rules": ["typo", "custom"], "customPrompt": "检查数字"},
        )

        assert response.status_code == 200
        system = response.json()["system"]
        assert "- 错别字检查：" in system
        assert "- 自定义要求：检查数字" in system

    def test_unknown_rule(self, client):
        response = client.post("/v1/review/prompt-preview", json={"rules": ["nope"]})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
