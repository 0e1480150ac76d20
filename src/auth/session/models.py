from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict
from starlette.responses import Response


class SessionData(BaseModel):
    """Server-side session record. Anything beyond `username` is kept as-is."""

    model_config = ConfigDict(extra="allow")

    username: Optional[str] = None


class CachedItem(BaseModel):
    """A value read back from the cache, with its write time and remaining lifetime (both ms)."""

    item: Any
    stored: int
    ttl: int


class SameSiteEnum(str, Enum):
    lax = "lax"
    strict = "strict"
    none = "none"


class CookieParameters(BaseModel):
    max_age: Optional[int] = None
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = True
    httponly: bool = True
    samesite: SameSiteEnum = SameSiteEnum.strict


class SetCookieDirective(BaseModel):
    name: str
    value: str
    params: CookieParameters

    def apply(self, response: Response) -> None:
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.params.max_age,
            path=self.params.path,
            domain=self.params.domain,
            secure=self.params.secure,
            httponly=self.params.httponly,
            samesite=self.params.samesite.value,
        )


class ClearCookieDirective(BaseModel):
    name: str
    params: CookieParameters

    def apply(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path=self.params.path,
            domain=self.params.domain,
            secure=self.params.secure,
            httponly=self.params.httponly,
            samesite=self.params.samesite.value,
        )


class Authenticated(BaseModel):
    status: Literal["authenticated"] = "authenticated"
    session_id: str
    record: SessionData

    @property
    def is_authenticated(self) -> bool:
        return True


class Anonymous(BaseModel):
    status: Literal["anonymous"] = "anonymous"

    @property
    def is_authenticated(self) -> bool:
        return False


class Invalid(BaseModel):
    """
    The request carried a session cookie that did not resolve to a live session.

    This is an expected outcome, not an error: treat the request as unauthenticated and,
    when `clear_cookie` is set, remove the stale cookie from the client.
    """

    status: Literal["invalid"] = "invalid"
    reason: Literal["cookie_invalid", "session_not_found", "session_rejected"]
    clear_cookie: bool = True

    @property
    def is_authenticated(self) -> bool:
        return False


AuthOutcome = Union[Authenticated, Anonymous, Invalid]
