"""
Request-scoped caller context.

Authentication happens upstream; the authenticated user id reaches this
service in the X-User-Id header. Every service call receives the context
explicitly instead of reading a global "current user".
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from app.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for one request."""
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def require_user(self) -> int:
        """Return the user id or raise AuthenticationError."""
        if self.user_id is None:
            raise AuthenticationError("Not authenticated")
        return self.user_id


def get_request_context(x_user_id: Optional[int] = Header(None)) -> RequestContext:
    """Dependency building the request context from the upstream auth header."""
    return RequestContext(user_id=x_user_id)
