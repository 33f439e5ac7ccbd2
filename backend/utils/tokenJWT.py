# utils/tokenJWT.py
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from repositories.token import TokenRepository
from repositories.user import UserRepository

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# Missing credentials are turned into 401 by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

# Persist a token id for the user and return the signed bearer token
def issue_token(db: Session, user: User, name: str = "auth_token") -> str:
    jti = uuid.uuid4().hex
    TokenRepository(db).create(user_id=user.id, jti=jti, name=name)
    return create_access_token(data={"sub": str(user.id), "jti": jti})

# Revoke every token of the user; returns how many were removed
def revoke_tokens(db: Session, user: User) -> int:
    return TokenRepository(db).delete_for_user(user.id)

# Retrieve the currently authenticated user based on the bearer token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthenticated.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
        jti: str = payload.get("jti")
        # Both claims are required for a revocable token
        if jti is None:
            raise credentials_exception
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    # A revoked (deleted) token no longer has a row
    token = TokenRepository(db).find_by_jti(jti)
    if token is None or token.user_id != user_id:
        raise credentials_exception

    # Roles are loaded once here and reused by role checks for this request
    user = UserRepository(db).find_with_roles(user_id)
    if user is None:
        raise credentials_exception
    return user

# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: User = Depends(get_current_user)):
        if allowed_roles and not current_user.has_role(*allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized. You do not have the required role to access this resource."
            )
        return current_user
    return _checker
