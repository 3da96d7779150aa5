from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from habit_tracker.deps import get_user_repository
from habit_tracker.repositories.user_repository import UserRepository
from habit_tracker.services.auth_service import (
    InvalidCredentialsError,
    UsernameTakenError,
    authenticate_user,
    register_user,
)
import logging

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger("habit_tracker.auth")


# ---------------------- MODELS ----------------------
class RegisterIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class LoginIn(BaseModel):
    username: str
    password: str


class UserOut(BaseModel):
    # public view only; hash and salt never leave the server
    id: int
    username: str


class TokenOut(BaseModel):
    token: str


# ---------------------- ROUTES ----------------------
@router.post("/register", response_model=UserOut)
async def register(payload: RegisterIn, users: UserRepository = Depends(get_user_repository)):
    logger.info(f"POST /auth/register received for username: {payload.username}")
    try:
        user = await register_user(users, payload.username, payload.password)
    except UsernameTakenError:
        logger.warning(f"Registration rejected, username taken: {payload.username}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username is already taken")

    logger.info(f"User registered successfully: {user.username} (id={user.id})")
    return UserOut(id=user.id, username=user.username)


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, users: UserRepository = Depends(get_user_repository)):
    logger.info(f"POST /auth/login received for username: {payload.username}")
    try:
        token = await authenticate_user(users, payload.username, payload.password)
    except InvalidCredentialsError as e:
        logger.warning(f"Login rejected for {payload.username}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User logged in successfully: {payload.username}")
    return TokenOut(token=token)
