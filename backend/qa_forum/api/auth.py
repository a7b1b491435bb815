"""Bearer-token boundary: turns an identity-provider JWT into the Author the core works with."""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from qa_forum.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from qa_forum.domain.qa.models import Author, USER_TYPES

_bearer = HTTPBearer(auto_error=False)


# ------------------------------------------------------------------
# JWT helpers
# ------------------------------------------------------------------
def create_access_token(
    user_id: str,
    user_name: str,
    user_type: str,
    avatar: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Mint a token in the shape the identity provider issues. Used by local tooling and tests."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    )
    payload = {
        "sub": user_id,
        "name": user_name,
        "user_type": user_type,
        "exp": expire,
    }
    if avatar:
        payload["avatar"] = avatar
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")


def _author_from_claims(claims: dict) -> Author:
    user_id = claims.get("sub")
    user_type = claims.get("user_type")
    if not user_id or user_type not in USER_TYPES:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is missing 'sub' or carries an unknown 'user_type'",
        )
    return Author(
        user_id=user_id,
        user_name=claims.get("name") or user_id,
        user_type=user_type,
        user_avatar=claims.get("avatar"),
    )


# ------------------------------------------------------------------
# Dependency: get current user from Bearer token
# ------------------------------------------------------------------
def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Author:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return _author_from_claims(_decode_token(credentials.credentials))
