"""
Owner identity from bearer tokens

Tokens are issued by the identity provider; this module only verifies
them and exposes the subject as the current owner.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from charmemo.core.config import Settings

# auto_error=False so a missing header is a 401, not a 403
security = HTTPBearer(auto_error=False)


def create_access_token(subject: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Access token for subject (tests and local tooling)"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": subject, "exp": expire, "type": "access"}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, settings: Settings, token_type: str = "access") -> Optional[dict]:
    """Decoded payload, or None when the token is invalid, expired or of another type"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


async def get_current_owner(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Owner id (token subject) of the authenticated caller"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    payload = verify_token(credentials.credentials, request.app.state.settings)
    if payload is None:
        raise credentials_exception
    owner = payload.get("sub")
    if not owner:
        raise credentials_exception
    return owner
