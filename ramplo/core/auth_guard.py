"""Caller identity for the API.

Login (magic links, sessions) lives outside this service; requests arrive with
a signed token whose ``sub`` is the user id, either in the ``access_token``
cookie or as a bearer token.
"""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from ramplo.core.config import settings
from ramplo.db.session import get_db
from ramplo.db.models.user import User

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(days=1)


def create_access_token(user_id: int, expires_delta: timedelta = ACCESS_TOKEN_EXPIRE) -> str:
    now = datetime.utcnow()
    claims = {"sub": str(user_id), "iat": now, "exp": now + expires_delta}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def _token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get("access_token")
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return None


def get_current_user_id(request: Request) -> int:
    token = _token_from_request(request)
    payload = decode_token(token) if token else None
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user
