# auth.py
"""
Bearer token verification shared by the routers.

Tokens are issued by the authentication provider; this service only checks
them. The "id" claim identifies the user acting on a request.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from config import settings


def verify_token(request: Request) -> Dict[str, Any]:
    """FastAPI dependency returning the decoded JWT payload."""
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    token = auth.split(" ")[1]
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT with the configured secret (internal tooling and tests)."""
    payload = dict(claims)
    if expires_delta is not None:
        payload["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def current_actor(token: Dict[str, Any]) -> Optional[str]:
    """User ID carried by a decoded token, as stored in processed_by."""
    user_id = token.get("id")
    return str(user_id) if user_id is not None else None
