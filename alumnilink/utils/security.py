from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from alumnilink import models
from alumnilink.config import settings
from alumnilink.database import get_db
from alumnilink.schemas.auth import TokenData


# ==========================
# AUTH CONFIG
# ==========================

# Tokens are minted by the platform's identity provider; this service only
# verifies them and resolves the caller.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


# ==========================
# JWT TOKEN
# ==========================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenData:
    """Decode a bearer token into the caller's identity. Raises JWTError when invalid."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token has no subject")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise JWTError("Token subject is not a user id")
    return TokenData(user_id=user_id, role=payload.get("role"))


# ==========================
# AUTH HELPERS
# ==========================

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> models.User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        token_data = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    user = db.query(models.User).filter(
        models.User.id == token_data.user_id,
        models.User.is_active.is_(True),
    ).first()

    if user is None:
        raise credentials_exception

    return user
