"""
API request and response models.

Pydantic models for FastAPI endpoint documentation and response
serialization. The request model only documents the body in OpenAPI;
authoritative validation happens in src.domain.validation so that every
rejection maps to the same envelope shape.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.domain.signup import UseCase


class WaitlistRequest(BaseModel):
    """Request body for joining the waitlist."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., description="Email address (case-insensitive)", examples=["jane@example.com"])
    consent: bool = Field(..., description="Explicit opt-in; must be true")
    name: str | None = Field(None, description="Optional display name, trimmed")
    use_case: str | None = Field(
        None,
        alias="useCase",
        description="Optional use-case tag: " + ", ".join(u.value for u in UseCase),
    )


class WaitlistResponse(BaseModel):
    """Uniform result envelope returned by every /waitlist call."""

    ok: bool
    error: str | None = Field(None, description="Human-readable reason when ok is false")


class HealthResponse(BaseModel):
    """Response model for the readiness check."""

    status: str
