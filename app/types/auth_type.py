from typing import Optional
from pydantic import BaseModel, EmailStr


class Credentials(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    message: str
    token: str


class MeResponse(BaseModel):
    name: str


class UserContext(BaseModel):
    """Identity decoded from a bearer token, passed explicitly to services."""

    id: str
    email: str

    class Config:
        frozen = True
