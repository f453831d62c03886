"""
===============================================================================
TARJETA CRC — docreview/interfaces/api/http/routers/review.py
===============================================================================

Name:
    Review Router

Responsibilities:
    - Endpoints HTTP para revisar un documento (sincrónico y NDJSON).
    - Preview del system prompt para la pantalla de configuración.
    - Traducción de ReviewFailure -> RFC7807.

Collaborators:
    - application.usecases: ReviewDocumentUseCase, ReviewDocumentInput
    - crosscutting.streaming.stream_review
    - schemas.review
===============================================================================
"""

from __future__ import annotations

from docreview.application.usecases import ReviewDocumentInput, ReviewDocumentUseCase
from docreview.container import build_system_prompt, get_review_document_use_case
from docreview.crosscutting.error_responses import internal_error, validation_error
from docreview.crosscutting.streaming import stream_review
from docreview.domain.rules import is_known_rule
from fastapi import APIRouter, Depends, Request

from ..error_mapping import raise_review_error
from ..schemas.review import PromptPreviewReq, PromptPreviewRes, ReviewReq, ReviewRes

router = APIRouter()


# =============================================================================
# Helpers
# =============================================================================


def _to_input(req: ReviewReq) -> ReviewDocumentInput:
    return ReviewDocumentInput(
        text=req.text,
        rules=tuple(req.rules),
        custom_prompt=req.custom_prompt,
        model=req.model,
        chunk_size=req.chunk_size,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/review", response_model=ReviewRes, tags=["review"])
async def review_document(
    req: ReviewReq,
    use_case: ReviewDocumentUseCase = Depends(get_review_document_use_case),
):
    result = await use_case.execute(_to_input(req))
    if result.error is not None:
        raise_review_error(result.error)
    if result.result is None:
        raise internal_error("审校服务出现未知错误")
    return result.result.to_dict()


@router.post("/review/stream", tags=["review"])
async def review_document_stream(
    req: ReviewReq,
    request: Request,
    use_case: ReviewDocumentUseCase = Depends(get_review_document_use_case),
):
    input_data = _to_input(req)

    # Validación antes de abrir el stream: el cliente recibe 4xx, no un 200.
    failure = use_case.validate(input_data)
    if failure is not None:
        raise_review_error(failure)

    events = use_case.stream(input_data)
    return stream_review(events, request)


@router.post("/review/prompt-preview", response_model=PromptPreviewRes, tags=["review"])
def prompt_preview(req: PromptPreviewReq):
    unknown = [rule_id for rule_id in req.rules if not is_known_rule(rule_id)]
    if unknown:
        raise validation_error(f"未知的审校规则: {', '.join(unknown)}")
    return PromptPreviewRes(system=build_system_prompt(req.rules, req.custom_prompt))

