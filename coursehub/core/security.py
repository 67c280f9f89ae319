# coursehub/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from coursehub.core.config import settings
from coursehub.core.exceptions import AuthenticationFailed, PermissionDenied
from coursehub.db.session import get_db
from coursehub.models.user import User, UserRole

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# auto_error=False so a missing header gets our own 401 message
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token carrying the user's id, email and role."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "id": user.id,
        "email": user.email,
        "role": UserRole(user.role).value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationFailed("Not authorized, token failed")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    user_id = payload.get("id")
    if user_id is None:
        raise AuthenticationFailed("Not authorized, token failed")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationFailed("User not found")
    return user


def require_roles(*roles: UserRole):
    """Dependency factory: the current user must hold one of ``roles``."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if UserRole(current_user.role) not in roles:
            raise PermissionDenied("You do not have permission to perform this action")
        return current_user

    return checker


get_current_admin = require_roles(UserRole.ADMIN)
