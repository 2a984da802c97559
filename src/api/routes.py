"""
API routes - Waitlist signup endpoints.

This module defines the HTTP endpoints:
- POST /waitlist - Validate and record a signup
- GET /waitlist - Liveness check, never touches the store
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_app_settings, get_registration_service
from src.api.envelope import error_response, success_response
from src.api.models import WaitlistRequest, WaitlistResponse
from src.config.settings import Settings
from src.domain.exceptions import InvalidPayload, StorageUnavailable, SubmissionRejected
from src.domain.registration import RegistrationService
from src.domain.validation import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["waitlist"])


@router.post(
    "/waitlist",
    response_model=WaitlistResponse,
    responses={
        400: {"model": WaitlistResponse, "description": "Submission rejected"},
        503: {"model": WaitlistResponse, "description": "Storage unavailable"},
    },
    summary="Join the waitlist",
    description="Submit an email with explicit consent. Resubmitting the same email "
    "succeeds again and updates the optional name and use case.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": WaitlistRequest.model_json_schema(by_alias=True)}
            },
        }
    },
)
async def join_waitlist(
    request: Request,
    service: RegistrationService = Depends(get_registration_service),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """
    Validate a submission and record it exactly once.

    - **email**: Email address, matched case-insensitively
    - **consent**: Must be `true`
    - **name**: Optional, trimmed
    - **useCase**: Optional, one of the allowed labels

    Returns `{"ok": true}` for both new and repeated signups.
    """
    try:
        payload = await request.json()
    except ValueError:
        return error_response(InvalidPayload("body is not valid JSON"))

    try:
        draft = validate_submission(payload, name_max_length=settings.name_max_length)
    except SubmissionRejected as e:
        # Expected user-input outcome, not a system failure
        logger.info("Submission rejected: %s", e.kind.value)
        return error_response(e)

    # Threadpool keeps the write running even if the client disconnects
    try:
        await run_in_threadpool(service.register, draft)
    except StorageUnavailable as e:
        return error_response(e)

    return success_response()


@router.get(
    "/waitlist",
    response_model=WaitlistResponse,
    response_model_exclude_none=True,
    summary="Waitlist liveness check",
)
async def waitlist_liveness() -> WaitlistResponse:
    """Always returns `{"ok": true}`; performs no store access."""
    return WaitlistResponse(ok=True)
