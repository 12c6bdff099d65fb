# blogspace/dependencies.py
import logging
from typing import Generator

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from blogspace.config import Settings
from blogspace.errors import forbidden, unauthorized
from blogspace.security import TokenClaims, decode_access_token
from blogspace.services.users import user_exists

logger = logging.getLogger(__name__)

COOKIE_NAME = "auth_token"

# Security scheme
session_cookie = APIKeyCookie(name=COOKIE_NAME, auto_error=False, description="Signed session token (JWT)")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    yield from request.app.state.db.get_db()


def get_current_user(
    token: str | None = Depends(session_cookie),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> TokenClaims:
    if not token:
        raise unauthorized("Authentication required")

    claims = decode_access_token(token, settings)
    if claims is None:
        raise unauthorized("Invalid or expired session")

    # Tokens outlive their account when it is deleted
    if not user_exists(db, claims.user_id):
        logger.info("Rejected session for deleted user %s", claims.user_id)
        raise unauthorized("Invalid or expired session")
    return claims


def require_admin(current_user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    if not current_user.is_admin:
        logger.warning("User %s denied admin access", current_user.user_id)
        raise forbidden("Access denied, admin role required")
    return current_user
