"""
Name: OpenRouter Completion Service Unit Tests

Responsibilities:
  - Request shape (endpoint, auth header, messages, model)
  - HTTP status -> ProviderError kind mapping
  - Empty content / truncated reasoning / timeouts
  - Retry only on transient failures

Notes:
  - httpx.MockTransport replaces the network; no real calls are made
"""

import json

import httpx
import pytest

from docreview.crosscutting.exceptions import ProviderError, ProviderErrorKind
from docreview.infrastructure.services import (
    OpenRouterCompletionService,
    create_retry_decorator,
    no_retry,
)


def _ok(content: str, finish_reason: str = "stop") -> httpx.Response:
    return httpx.Response(
        200,
        json={"choices": [{"message": {"content": content}, "finish_reason": finish_reason}]},
    )


def _service(handler, *, api_key="sk-test", retry_decorator=no_retry):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenRouterCompletionService(
        api_key,
        base_url="https://openrouter.test/api/v1/",
        client=client,
        retry_decorator=retry_decorator,
    )


@pytest.mark.unit
class TestRequest:
    @pytest.mark.asyncio
    async def test_posts_chat_completion(self):
        """R: System prompt + chunk text as OpenAI-style messages."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok("[]")

        service = _service(handler)

        reply = await service.complete("SYSTEM", "文档", "anthropic/claude-sonnet-4", 5.0)

        assert reply == "[]"
        [request] = seen
        assert str(request.url) == "https://openrouter.test/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "anthropic/claude-sonnet-4"
        assert body["messages"] == [
            {"role": "system", "content": "SYSTEM"},
            {"role": "user", "content": "文档"},
        ]
        await service.aclose()

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_without_request(self):
        """R: No key configured -> UNAUTHORIZED, nothing sent."""
        seen = []

        def handler(request):
            seen.append(request)
            return _ok("[]")

        service = _service(handler, api_key="  ")

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 5.0)

        assert exc_info.value.kind is ProviderErrorKind.UNAUTHORIZED
        assert seen == []


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, kind",
        [
            (401, ProviderErrorKind.UNAUTHORIZED),
            (403, ProviderErrorKind.UNAUTHORIZED),
            (402, ProviderErrorKind.QUOTA),
            (429, ProviderErrorKind.RATE_LIMITED),
            (500, ProviderErrorKind.UNAVAILABLE),
        ],
    )
    async def test_status_codes(self, status, kind):
        service = _service(lambda request: httpx.Response(status, json={}))

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 5.0)

        assert exc_info.value.kind is kind
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_provider_message_is_surfaced(self):
        service = _service(
            lambda request: httpx.Response(500, json={"error": {"message": "upstream down"}})
        )

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 5.0)

        assert exc_info.value.message == "AI 调用失败: upstream down"

    @pytest.mark.asyncio
    async def test_empty_content_after_length_stop(self):
        """R: Reasoning models can burn the whole budget before answering."""
        service = _service(lambda request: _ok("", finish_reason="length"))

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 5.0)

        assert exc_info.value.kind is ProviderErrorKind.EMPTY_RESPONSE
        assert "截断" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_choices_is_empty_response(self):
        service = _service(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 5.0)

        assert exc_info.value.kind is ProviderErrorKind.EMPTY_RESPONSE

    @pytest.mark.asyncio
    async def test_transport_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        service = _service(handler)

        with pytest.raises(ProviderError) as exc_info:
            await service.complete("s", "u", "m", 3.0)

        assert exc_info.value.kind is ProviderErrorKind.TIMEOUT
        assert exc_info.value.message.startswith("请求超时（3秒）")


@pytest.mark.unit
class TestRetry:
    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self):
        responses = iter([httpx.Response(503, json={}), _ok("[]")])
        calls = []

        def handler(request):
            calls.append(request)
            return next(responses)

        decorator = create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0.01)
        service = _service(handler, retry_decorator=decorator)

        assert await service.complete("s", "u", "m", 5.0) == "[]"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_quota_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(402, json={})

        decorator = create_retry_decorator(max_attempts=3, base_delay=0, max_delay=0.01)
        service = _service(handler, retry_decorator=decorator)

        with pytest.raises(ProviderError):
            await service.complete("s", "u", "m", 5.0)

        assert len(calls) == 1
