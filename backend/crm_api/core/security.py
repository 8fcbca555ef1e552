# backend/crm_api/core/security.py
"""Password hashing and the bearer tokens that carry caller identity.

Tokens are issued by the login service that fronts this API. The claims are
``sub`` (user id), ``company_id`` and ``sections``. ``create_access_token``
mints the same shape for local tooling and the test suite.
"""

import bcrypt
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from crm_api.core.config import settings
from crm_api.services.authorization import CallerInfo


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(caller: CallerInfo, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {
        "sub": str(caller.user_id),
        "company_id": caller.company_id,
        "sections": sorted(caller.sections),
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_caller(token: str) -> CallerInfo:
    """Verify ``token`` and read the caller identity from its claims.

    Raises:
        ValueError: If the signature, expiry or claims are invalid
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise ValueError("Invalid token") from e

    try:
        return CallerInfo(
            company_id=int(payload["company_id"]),
            user_id=int(payload["sub"]),
            sections=frozenset(payload.get("sections") or []),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError("Invalid token claims") from e
