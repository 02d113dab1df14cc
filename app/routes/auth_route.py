import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.exceptions import NotFoundError, ValidationError
from app.models.user_model import User
from app.types.auth_type import Credentials, MeResponse, TokenResponse, UserContext
from app.services.auth_service import (
    authenticate_user, create_user, get_current_user, create_access_token
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


def _require_credentials(credentials: Credentials):
    if not credentials.email or not credentials.password:
        raise ValidationError("Email and password required")
    return credentials.email, credentials.password


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(credentials: Credentials, db: Session = Depends(get_db)):
    email, password = _require_credentials(credentials)
    user = create_user(db, email=email, password=password)
    logger.info("Registered user %s", user.id)
    return TokenResponse(message="User created", token=create_access_token(user))


@router.post("/login", response_model=TokenResponse)
def login(credentials: Credentials, db: Session = Depends(get_db)):
    email, password = _require_credentials(credentials)
    user = authenticate_user(db, email, password)
    return TokenResponse(message="Logged in", token=create_access_token(user))


@router.get("/auth/me", response_model=MeResponse)
def read_users_me(
    current_user: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = db.query(User).filter(User.id == current_user.id).first()
    if user is None:
        raise NotFoundError("User not found")
    return MeResponse(name=user.email.split("@")[0])
