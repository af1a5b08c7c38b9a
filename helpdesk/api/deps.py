"""
FastAPI dependencies.

Settings and Database live on app.state (set by create_app); nothing here
reads module-level state.
"""
from typing import Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from helpdesk.core.config import Settings
from helpdesk.core.errors import AuthenticationError
from helpdesk.db.session import Database
from helpdesk.services.helpdesk import HelpdeskService
from helpdesk.services.identity import AuthContext, IdentityService, context_from_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_session(database: Database = Depends(get_database)) -> Iterator[Session]:
    """One session per request"""
    yield from database.session()


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> AuthContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Token not provided")
    return context_from_token(credentials.credentials, settings)


def get_helpdesk(session: Session = Depends(get_session)) -> HelpdeskService:
    return HelpdeskService(session)


def get_identity(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> IdentityService:
    return IdentityService(session, settings)
