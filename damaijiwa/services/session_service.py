"""Binding between a browser session and a user id.

The cookie session (Starlette's ``SessionMiddleware``) is the only place the
binding lives. ``SessionBinder`` is built per request by ``get_session_binder``
and is the single authorization gate for protected routes.
"""
import logging
from typing import MutableMapping, Optional

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from damaijiwa.core.config import settings
from damaijiwa.core.database import SessionLocal, get_db
from damaijiwa.core.exceptions import UnauthorizedError, error_body, validation_error_handler
from damaijiwa.schemas.user import UserResponse
from damaijiwa.services.google_oauth_service import GoogleOAuthService, google_oauth_service
from damaijiwa.services.user_service import user_service

logger = logging.getLogger("session_service")

SESSION_USER_KEY = "user_id"


class SessionBinder:
    def __init__(
        self,
        session: MutableMapping,
        db: Session,
        oauth: Optional[GoogleOAuthService] = None,
    ):
        self.session = session
        self.db = db
        self.oauth = oauth or google_oauth_service

    @property
    def user_id(self) -> Optional[str]:
        return self.session.get(SESSION_USER_KEY)

    def bind(self, user_id: str) -> None:
        self.session[SESSION_USER_KEY] = user_id

    def establish_anonymous(self) -> UserResponse:
        user = user_service.create_anonymous_user(self.db)
        self.bind(user.id)
        return user

    def authorization_url(self) -> str:
        return self.oauth.authorization_url()

    async def exchange_oauth_code(self, code: str) -> UserResponse:
        # the exchange raises before anything local is touched
        identity = await self.oauth.exchange_code(code)
        user = user_service.upsert_google_user(self.db, identity)
        self.bind(user.id)
        logger.info(f"OAuth login for {user.id}")
        return user

    def current_user(self) -> Optional[UserResponse]:
        if not self.user_id:
            return None
        return user_service.get_user_by_id(self.db, self.user_id)

    def require_user(self) -> UserResponse:
        user = self.current_user()
        if user is None:
            raise UnauthorizedError()
        return user

    def terminate(self) -> None:
        self.session.clear()


def get_oauth_service() -> GoogleOAuthService:
    return google_oauth_service


def get_session_binder(
    request: Request,
    db: Session = Depends(get_db),
    oauth: GoogleOAuthService = Depends(get_oauth_service),
) -> SessionBinder:
    return SessionBinder(request.session, db, oauth)


def get_current_user(binder: SessionBinder = Depends(get_session_binder)) -> UserResponse:
    """Dependency for routes that need an authenticated (or anonymous) user."""
    return binder.require_user()


def is_protected_path(path: str) -> bool:
    return path.startswith(f"{settings.api_prefix}/chat/")


async def session_gated_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body parsing runs before dependencies, so re-apply the session gate here.

    An unauthenticated caller on a protected route gets 401 even when the body
    is malformed.
    """
    if is_protected_path(request.url.path):
        db = SessionLocal()
        try:
            user = SessionBinder(request.session, db).current_user()
        finally:
            db.close()
        if user is None:
            return JSONResponse(status_code=UnauthorizedError.status_code, content=error_body(UnauthorizedError.message))
    return await validation_error_handler(request, exc)
