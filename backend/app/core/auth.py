"""
Authentication for the admin dashboard
Issues and validates HS256 JWTs and provides the admin context to routes
"""
import logging
from typing import Optional
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Query, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenAdmin(BaseModel):
    """Admin data carried in the JWT"""
    id: int
    username: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(admin_id: int, username: str, expires_hours: Optional[int] = None) -> str:
    """
    Sign a token for an admin

    Payload:
    {
        "admin": {"id": 1, "username": "admin"},
        "iat": 1234567890,
        "exp": 1234654290
    }
    """
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=expires_hours or settings.JWT_EXPIRES_HOURS)
    payload = {
        "admin": {"id": admin_id, "username": username},
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.get_jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_admin_token(token: str) -> TokenAdmin:
    """
    Decode and validate an admin JWT

    Raises:
        AuthorizationError: Expired, tampered or malformed token
    """
    try:
        payload = jwt.decode(token, settings.get_jwt_secret(), algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        if "expired" in str(e).lower():
            raise AuthorizationError("Token has expired")
        raise AuthorizationError("Token is not valid")

    admin = payload.get("admin") or {}
    if admin.get("id") is None or not admin.get("username"):
        raise AuthorizationError("Token is not valid")

    return TokenAdmin(id=admin["id"], username=admin["username"])


def _request_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials:
        return credentials.credentials
    return request.headers.get("x-auth-token")


async def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenAdmin:
    """
    Dependency that extracts and validates the current admin.

    Accepts `Authorization: Bearer <jwt>` or the `x-auth-token` header.

    Usage:
        @router.get("/protected")
        async def protected_route(admin: TokenAdmin = Depends(get_current_admin)):
            return {"message": f"Hello {admin.username}"}
    """
    token = _request_token(request, credentials)
    if not token:
        raise AuthorizationError("No token, authorization denied")
    return decode_admin_token(token)


async def get_current_admin_or_query(
    request: Request,
    token: Optional[str] = Query(None, description="JWT, for links opened outside the dashboard"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenAdmin:
    """Same as get_current_admin, also accepting ?token= (browser-initiated downloads)"""
    token = _request_token(request, credentials) or token
    if not token:
        raise AuthorizationError("No token, authorization denied")
    return decode_admin_token(token)


def verify_socket_token(token: Optional[str]) -> Optional[TokenAdmin]:
    """Validate the token sent in a WebSocket authenticate message, None if invalid"""
    if not token:
        return None
    try:
        return decode_admin_token(token)
    except AuthorizationError as e:
        logger.warning(f"WebSocket authentication rejected: {e.message}")
        return None
