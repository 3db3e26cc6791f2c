"""Pydantic schemas for API responses."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field  # type: ignore


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs."""

    type: str = Field(description="A URI reference that identifies the problem type")
    title: str = Field(
        description="A short, human-readable summary of the problem type"
    )
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(
        None, description="A human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="A URI reference that identifies the specific occurrence"
    )


class ApiHealth(BaseModel):
    """Schema for the tracker API health check."""

    status: str = Field("ok", description="Always 'ok' while the API answers")


class TrackerStatus(BaseModel):
    """Schema for a tracker status endpoint."""

    message: str = Field(description="Where this tracker's data lives")


class ServiceHealth(BaseModel):
    """Schema for the service liveness check."""

    status: str
    service: str
    version: str


class ServiceReadiness(BaseModel):
    """Schema for the service readiness check."""

    status: str
    service: str
    version: str
    checks: Dict[str, bool]
    response_time_ms: float
    errors: Optional[List[str]] = None
