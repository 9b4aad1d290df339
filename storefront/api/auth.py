# storefront/api/auth.py
from datetime import datetime, timedelta, timezone

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from storefront.domain.errors import AuthenticationError
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

FORBIDDEN_MESSAGE = "Forbidden: Invalid or expired token."


def create_access_token(user_id: int, email: str | None = None, expires_minutes: int | None = None) -> str:
    """Token with the same claims the login endpoint issues: id, email, exp."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    claims = {"id": user_id, "exp": expire}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def current_user(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> int:
    """Returns the caller's user id from the bearer token, or fails with 401 / 403."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication token required.", status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        payload = jwt.decode(credentials.credentials, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        raise AuthenticationError(FORBIDDEN_MESSAGE, status_code=status.HTTP_403_FORBIDDEN) from e

    user_id = payload.get("id", payload.get("sub"))
    try:
        return int(user_id)
    except (TypeError, ValueError) as e:
        raise AuthenticationError(FORBIDDEN_MESSAGE, status_code=status.HTTP_403_FORBIDDEN) from e
