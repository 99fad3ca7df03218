import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from vehicle_rental import config
from vehicle_rental.database import get_db
from vehicle_rental.errors import ForbiddenError, UnauthorizedError
from vehicle_rental.models import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return str(pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed token for ``user``.

    The payload carries the user uid as ``sub`` together with the email and
    the roles held at issue time.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=config.JWT_EXPIRATION_HOURS))
    payload: Dict[str, Any] = {
        "sub": str(user.user_uid),
        "email": user.email,
        "roles": list(user.roles or []),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except PyJWTError:
        raise UnauthorizedError("Invalid or expired token")


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Dict[str, Any]:
    if not credentials:
        raise UnauthorizedError("Authentication required")
    return decode_access_token(credentials.credentials)


def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> User:
    """Dependency returning the authenticated user from the bearer token."""
    try:
        user_uid = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthorizedError("Invalid or expired token")

    user = db.query(User).filter(User.user_uid == user_uid).first()
    if not user:
        raise UnauthorizedError("User not found")
    return user


def require_role(required_role: UserRole):
    """Dependency factory rejecting users that do not hold ``required_role``."""
    def role_checker(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(required_role):
            raise ForbiddenError("Insufficient permissions")
        return user

    return role_checker
