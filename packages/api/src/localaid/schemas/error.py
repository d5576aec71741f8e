# This project was developed with assistance from AI tools.
"""Error envelope: ``{success: false, error}`` merged with RFC 7807 Problem Details."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every exception handler.

    ``success``/``error``/``details`` are what frontend callers branch on; the
    remaining fields follow RFC 7807 (https://datatracker.ietf.org/doc/html/rfc7807).
    """

    success: bool = False
    error: str = Field(description="Human-readable error message.")
    details: Any = Field(
        default=None,
        description="Field-error map for validation failures, or the underlying message.",
    )
    type: str = Field(
        default="about:blank",
        description="URI reference identifying the problem type.",
    )
    title: str = Field(description="Short human-readable summary of the problem.")
    status: int = Field(description="HTTP status code.")
    detail: str = Field(
        default="",
        description="Human-readable explanation specific to this occurrence.",
    )
    request_id: str = Field(
        default="",
        description="Correlation ID for tracing this request in logs.",
    )
    instance: str = Field(
        default="",
        description="URI reference identifying the specific occurrence of the problem.",
    )
