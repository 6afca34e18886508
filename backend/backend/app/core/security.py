from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

bearer = HTTPBearer(auto_error=False)

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
JWT_TTL_MIN = int(os.getenv("JWT_TTL_MIN", "720"))  # one picking shift

IAM_ISSUER = os.getenv("IAM_ISSUER", "pickflow-auth")
IAM_AUDIENCE = os.getenv("IAM_AUDIENCE", "pickflow-api")


@dataclass
class Principal:
    user_id: str | None = None
    username: str = "anonymous"
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


def create_access_token(user_id: str, *, username: str | None = None, role: str = "picker") -> str:
    """Mint a token the way the login service does; used by tooling and tests."""
    now = datetime.now(timezone.utc)
    payload = {
        "iss": IAM_ISSUER,
        "aud": IAM_AUDIENCE,
        "sub": user_id,
        "name": username or user_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=JWT_TTL_MIN)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> Principal:
    if not creds or not creds.credentials:
        return Principal()

    try:
        payload = jwt.decode(
            creds.credentials,
            JWT_SECRET,
            algorithms=[JWT_ALG],
            audience=IAM_AUDIENCE,
            issuer=IAM_ISSUER,
        )
    except JWTError:
        return Principal()

    user_id = payload.get("sub")
    if not user_id:
        return Principal()
    return Principal(user_id=str(user_id), username=str(payload.get("name") or user_id), role=payload.get("role"))


def require_user(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authorized to access this route")
    return principal
