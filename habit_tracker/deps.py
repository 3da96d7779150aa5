# habit_tracker/deps.py
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.ext.asyncio import AsyncSession
from habit_tracker.utils.database import get_db
from habit_tracker.services.auth_service import AuthorizationError, decode_access_token, extract_caller_id
from habit_tracker.services.habit_service import HabitService
from habit_tracker.repositories.habit_repository import HabitRepository
from habit_tracker.repositories.user_repository import UserRepository
from habit_tracker.models.user import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_habit_repository(db: AsyncSession = Depends(get_db)) -> HabitRepository:
    return HabitRepository(db)


async def get_current_user(authorization: str = Header(None), users: UserRepository = Depends(get_user_repository)) -> User:
    """
    Expect Authorization: Bearer <token>
    Returns User instance or raises 401.
    """
    if not authorization:
        raise _unauthorized("Missing authorization header")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header")
    claims = decode_access_token(parts[1])
    if claims is None:
        raise _unauthorized("Invalid or expired token")
    caller_id = extract_caller_id(claims)
    if isinstance(caller_id, AuthorizationError):
        raise _unauthorized(caller_id.reason)
    user = await users.get_by_id(caller_id)
    if not user:
        raise _unauthorized("User not found")
    return user


def get_habit_service(
    current_user: User = Depends(get_current_user),
    habits: HabitRepository = Depends(get_habit_repository),
) -> HabitService:
    return HabitService(habits, current_user.id)
