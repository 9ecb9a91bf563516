from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional

from . import schemas, models
from .config import settings
from .database import get_db
from .exceptions import Unauthorized, Forbidden

# auto_error is off so a missing header ends up as our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def create_access_token(data: dict):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(to_encode, key=settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def verify_access_token(token: str) -> schemas.TokenData:
    try:
        payload = jwt.decode(token, key=settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise Unauthorized("Invalid or expired token")

    user_id = payload.get("user_id")
    username = payload.get("username")
    if user_id is None or username is None:
        raise Unauthorized("Invalid token")

    try:
        return schemas.TokenData(user_id=int(user_id), username=username)
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token")


def authenticate(db: Session, token: Optional[str]) -> models.User:
    """Resolve a bearer token to the user it was issued for."""
    if not token:
        raise Unauthorized("Missing token")

    token_data = verify_access_token(token)

    user = db.query(models.User).filter(models.User.user_id == token_data.user_id).first()
    if not user or user.username != token_data.username:
        raise Unauthorized("Unauthorized")

    return user


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    return authenticate(db, token)


def get_current_admin(current_user: models.User = Depends(get_current_user)):
    if current_user.username not in settings.admin_usernames:
        raise Forbidden()
    return current_user
