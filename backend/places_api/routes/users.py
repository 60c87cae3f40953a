"""
User API Routes

Signup, login and the public user listing.  Signup and login both
answer with the user id, email and a fresh session token.
"""

import re
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlmodel import Session

from places_api.database import get_session
from places_api.errors import InvalidInput
from places_api.models.user import User
from places_api.services import user_service
from places_api.services.credentials import issue_token
from places_api.services.uploads import store_image

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


# ============================================================================
# Request/Response Models
# ============================================================================


class UserResponse(BaseModel):
    """Public projection of a user; the password hash is never included."""

    id: int
    name: str
    email: str
    image: str
    places: List[int]

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, image=user.image, places=user.place_ids)


class UserListResponse(BaseModel):
    users: List[UserResponse]


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    email: str
    token: str


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if not v or not v.strip():
            raise ValueError("email is required")
        return v.strip()


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/users", response_model=UserListResponse)
def list_users(session: Session = Depends(get_session)):
    """List all users"""
    users = user_service.list_users(session)
    return UserListResponse(users=[UserResponse.from_user(u) for u in users])


@router.post("/users/signup", response_model=AuthResponse, status_code=201)
def signup(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    image: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    """
    Register a user and log them in.

    Multipart form: name, email, password (>= 6 chars), image.
    A duplicate email (case-insensitive) is a 422.
    """
    name = name.strip()
    email = email.strip()
    if not name or not EMAIL_PATTERN.match(email) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput()

    image_path = store_image(image)
    user = user_service.signup(session, name=name, email=email, password=password, image_path=image_path)
    token = issue_token(user.id, user.email)
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.post("/users/login", response_model=AuthResponse)
def login(request: LoginRequest, session: Session = Depends(get_session)):
    """Exchange email and password for a session token"""
    user, token = user_service.login(session, request.email, request.password)
    return AuthResponse(user_id=user.id, email=user.email, token=token)
