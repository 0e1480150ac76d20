from .misc import router as misc_router
from .session import router as session_router

__all__ = [
    "misc_router",
    "session_router",
]
