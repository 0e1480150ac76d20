from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class PageResponse(BaseModel):
    """What a page handler returns in place of a rendered template."""

    page: Literal["home", "public", "private", "login"] = Field(
        description="Name of the page being served",
        examples=["home"],
    )
    session: dict[str, Any] = Field(
        description="Session record of the current user, empty when not logged in",
        default={},
    )


class LoginErrorResponse(BaseModel):
    error: str = Field(
        description="Why the login attempt was rejected",
        examples=["Invalid Credentials"],
    )


class ErrorResponse(BaseModel):
    error: str = Field(
        description="Short description of the error"
    )
    error_code: str = Field(
        description="Machine readable error code",
        examples=["session_backend_unavailable"],
    )
    message: str = Field(
        description="Longer explanation shown to the user"
    )
    action_required: Optional[str] = Field(
        description="What the user can do about it",
        default=None,
    )


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"
    session_backend_ready: bool = Field(
        description="Whether the session cache backend has been started"
    )
