"""
Name: Review Error Mapping Unit Tests

Responsibilities:
  - ReviewFailure -> AppHTTPException status/code
"""

import pytest

from docreview.application.usecases import ReviewErrorCode, ReviewFailure
from docreview.crosscutting.error_responses import AppHTTPException, ErrorCode
from docreview.crosscutting.exceptions import ProviderErrorKind
from docreview.interfaces.api.http.error_mapping import raise_review_error


@pytest.mark.unit
class TestRaiseReviewError:
    def test_validation(self):
        failure = ReviewFailure(
            code=ReviewErrorCode.VALIDATION_ERROR, message="请至少选择一条审校规则", field="rules"
        )

        with pytest.raises(AppHTTPException) as exc_info:
            raise_review_error(failure)

        assert exc_info.value.status_code == 422
        assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
        assert exc_info.value.errors == [{"field": "rules", "msg": "请至少选择一条审校规则"}]

    @pytest.mark.parametrize(
        "kind, status, code",
        [
            (ProviderErrorKind.TIMEOUT, 504, ErrorCode.LLM_TIMEOUT),
            (ProviderErrorKind.UNAUTHORIZED, 401, ErrorCode.UNAUTHORIZED),
            (ProviderErrorKind.QUOTA, 402, ErrorCode.PAYMENT_REQUIRED),
            (ProviderErrorKind.RATE_LIMITED, 429, ErrorCode.RATE_LIMITED),
            (ProviderErrorKind.EMPTY_RESPONSE, 502, ErrorCode.LLM_ERROR),
            (ProviderErrorKind.UNAVAILABLE, 502, ErrorCode.LLM_ERROR),
            (None, 502, ErrorCode.LLM_ERROR),
        ],
    )
    def test_provider_kinds(self, kind, status, code):
        failure = ReviewFailure(
            code=ReviewErrorCode.PROVIDER_ERROR, message="x", provider_kind=kind
        )

        with pytest.raises(AppHTTPException) as exc_info:
            raise_review_error(failure)

        assert exc_info.value.status_code == status
        assert exc_info.value.code is code
        assert exc_info.value.detail == "x"
