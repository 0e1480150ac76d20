from .schema import ErrorResponse, LoginErrorResponse, PageResponse, StatusResponse

__all__ = [
    "ErrorResponse",
    "LoginErrorResponse",
    "PageResponse",
    "StatusResponse",
]
