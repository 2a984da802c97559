"""
Response envelope - Maps domain outcomes to the wire shape.

Both successful outcomes (CREATED, ALREADY_REGISTERED) produce the same
``{"ok": true}`` body. Failures produce ``{"ok": false, "error": reason}``
where ``reason`` is the fixed text of the error kind, never the
exception message.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from src.api.models import WaitlistResponse
from src.domain.exceptions import ErrorKind, WaitlistError

_STATUS_BY_KIND = {
    ErrorKind.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def success_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=WaitlistResponse(ok=True).model_dump(exclude_none=True),
    )


def error_response(error: WaitlistError) -> JSONResponse:
    """Build the failure envelope; validation kinds are 400, storage is 503."""
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST),
        content=WaitlistResponse(ok=False, error=error.reason).model_dump(exclude_none=True),
    )
