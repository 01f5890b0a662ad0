from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi.security import HTTPBearer
from jose import jwt

from .config import get_settings

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(subject: Dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign a token for ``subject``.

    Accounts live outside this service; the issuer shares ``jwt_secret_key``
    and this helper mirrors what it produces.
    """
    settings = get_settings()
    to_encode = subject.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
