"""
Authentication helpers for verifying session tokens issued by the OAuth layer.

Tokens are HS256 JWTs carrying the visitor's ``email`` claim. Login flows live
in the frontend; this module only verifies and reads the token.
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.database import get_db
from app.models import Profile

logger = logging.getLogger(__name__)


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(request: Request) -> str:
    """
    Extract 'Bearer <token>' from Authorization header.
    """
    auth = request.headers.get("Authorization")
    if not auth:
        raise _unauthorized("Missing Authorization header")

    parts = auth.split()
    if len(parts) != 2:
        raise _unauthorized("Invalid Authorization header format. Expected 'Bearer <token>'")

    scheme, token = parts
    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme. Expected 'Bearer'")

    return token


def decode_session_token(token: str) -> Dict[str, Any]:
    """Verify signature (and audience, when configured) and return the claims."""
    try:
        settings.require_auth()
    except RuntimeError as e:
        logger.error(f"Auth configuration missing: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication is not configured.",
        )

    options = {"verify_aud": bool(settings.AUTH_JWT_AUD)}
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUD,
            options=options,
        )
    except JWTError as e:
        logger.warning(f"Session token validation failed: {e}")
        raise _unauthorized("Token validation failed")


def get_session_claims(request: Request) -> Dict[str, Any]:
    """FastAPI dependency: verified claims of the request's session token."""
    return decode_session_token(_extract_bearer_token(request))


def email_from_claims(claims: Dict[str, Any]) -> str:
    email = (claims.get("email") or "").strip()
    if not email:
        raise _unauthorized("Token missing email claim")
    return email


def get_current_email(request: Request) -> str:
    """
    FastAPI dependency: the authenticated visitor's email.
    """
    return email_from_claims(get_session_claims(request))


def get_current_profile(
    email: str = Depends(get_current_email),
    db: Session = Depends(get_db),
) -> Profile:
    """
    FastAPI dependency: the Profile row for the authenticated visitor.

    Visitors who have never been synced have no profile yet (404).
    """
    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile
