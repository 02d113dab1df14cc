import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from jose import JWTError
from jose import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.models.user_model import User
from app.types.auth_type import UserContext
from app.config import settings
from app.exceptions import (
    ConflictError, ForbiddenError, InvalidCredentialsError, StorageError, UnauthorizedError
)

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_DAYS = settings.ACCESS_TOKEN_EXPIRE_DAYS


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    # Same error for both factors so callers can't enumerate registered emails
    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()
    return user


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {"id": user.id, "email": user.email, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_user(db: Session, email: str, password: str) -> User:
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    db_user = User(email=email, hashed_password=get_password_hash(password))
    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("Email already registered")
    except SQLAlchemyError as db_error:
        db.rollback()
        logger.error("Could not create user: %s", db_error)
        raise StorageError("Failed to create user")
    return db_user


def decode_access_token(token: str) -> UserContext:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise ForbiddenError()

    user_id = payload.get("id")
    email = payload.get("email")
    if not user_id or not email:
        raise ForbiddenError()
    return UserContext(id=str(user_id), email=email)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserContext:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return decode_access_token(credentials.credentials)
