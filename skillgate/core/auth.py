"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- The synthetic admin identity used by the reserved admin login
- FastAPI dependencies for protected routes (role and approval checks)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from skillgate.core.config import get_settings
from skillgate.core.errors import AuthError, ForbiddenError
from skillgate.services.mongo_service import UserStore, public_user

settings = get_settings()
logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header handled below as a 401)
bearer_scheme = HTTPBearer(auto_error=False)

# Fixed id of the reserved admin identity; never stored in the users collection
ADMIN_ID = "000000000000000000000000"


def admin_identity() -> dict:
    """The synthetic administrator returned by the reserved login."""
    return {
        "id": ADMIN_ID,
        "name": "System Administrator",
        "email": settings.admin_email,
        "role": "admin",
        "status": "approved",
    }


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # not a recognised hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def issue_token(user: dict) -> str:
    """Token bound to a serialized user (must carry id and role)."""
    return create_access_token(data={"sub": user["id"], "role": user["role"]})


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    if not payload:
        logger.warning("Rejected invalid or expired token")
        raise AuthError("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid or expired token")

    if user_id == ADMIN_ID:
        return admin_identity()

    user = UserStore().get_by_id(user_id)
    if not user:
        raise AuthError("Invalid or expired token")

    return public_user(user)


def require_role(role: str, approved: bool = False):
    """
    Dependency factory - restrict a route to one role and optionally to
    accounts an admin has approved.
    """
    async def _checker(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] != role:
            raise ForbiddenError(f"Only {role} accounts can access this resource")
        if approved and user.get("status") != "approved":
            raise ForbiddenError("Account is not approved yet")
        return user
    return _checker


get_current_student = require_role("student")
get_current_company = require_role("company")
get_current_admin = require_role("admin")
get_approved_student = require_role("student", approved=True)
get_approved_company = require_role("company", approved=True)
