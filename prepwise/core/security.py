# prepwise/core/security.py - Bearer token identity

from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from firebase_admin import auth
from loguru import logger

from prepwise.core.config import get_settings
from prepwise.models.user import CurrentUser

# Security scheme
security = HTTPBearer(auto_error=False)

def _credentials_exception(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token"""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm="HS256")
    return encoded_jwt

def verify_token(token: str) -> CurrentUser:
    """Verify JWT token and read the user id and role flag"""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except JWTError as e:
        logger.debug(f"JWT rejected: {e}")
        raise _credentials_exception()

    user_id = payload.get("sub")
    if not user_id:
        raise _credentials_exception()

    return CurrentUser(user_id=user_id, is_recruiter=bool(payload.get("is_recruiter", False)))

def verify_firebase_token(id_token: str) -> CurrentUser:
    """Verify Firebase ID token; the recruiter flag is a custom claim"""
    try:
        decoded_token = auth.verify_id_token(id_token)
    except Exception as e:
        raise _credentials_exception(f"Invalid Firebase token: {str(e)}")
    return CurrentUser(
        user_id=decoded_token["uid"],
        is_recruiter=bool(decoded_token.get("is_recruiter", False)),
    )

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Resolve the bearer token to the calling user"""
    if not credentials:
        raise _credentials_exception("No credentials provided")

    if credentials.scheme.lower() != "bearer":
        raise _credentials_exception("Invalid authentication scheme")

    token = credentials.credentials
    if not token:
        raise _credentials_exception("Empty token")

    if get_settings().FIREBASE_AUTH_ENABLED:
        return verify_firebase_token(token)
    return verify_token(token)
