from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.models import Role, User

SESSION_USER_KEY = "user"


@dataclass(frozen=True)
class SessionUser:
    # Snapshot taken at login; later changes to the users row are not reflected
    id: int
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(id=user.id, email=user.email, role=user.role)

    @classmethod
    def from_session(cls, data) -> Optional["SessionUser"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(id=int(data["id"]), email=str(data["email"]), role=str(data["role"]))
        except (KeyError, TypeError, ValueError):
            return None

    def to_session(self) -> dict:
        return {"id": self.id, "email": self.email, "role": self.role}

    def has_role(self, role: Optional[Role]) -> bool:
        return role is None or self.role == Role(role).value

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)


@dataclass
class RequestContext:
    request: Request
    db: Session
    user: Optional[SessionUser] = None


class GuardRedirect(Exception):
    """Raised by a guard to send the client somewhere else instead of the route."""

    def __init__(self, url: str):
        super().__init__(url)
        self.url = url


def get_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    user = SessionUser.from_session(request.session.get(SESSION_USER_KEY))
    return RequestContext(request=request, db=db, user=user)


def require_role(role: Optional[Role] = None):
    """
    Build a dependency that lets the request through only for a logged-in
    user holding ``role`` (any logged-in user when ``role`` is None).

    Anonymous users of a plain login check go to the login page. Every
    failure of a role check goes to the home page, whether or not the
    client is logged in.
    """
    failure_url = "/login" if role is None else "/"

    def _checker(ctx: RequestContext = Depends(get_context)) -> RequestContext:
        if ctx.user is None or not ctx.user.has_role(role):
            raise GuardRedirect(failure_url)
        return ctx

    return _checker


require_auth = require_role()
require_admin = require_role(Role.ADMIN)
