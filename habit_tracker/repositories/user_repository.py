# habit_tracker/repositories/user_repository.py
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from habit_tracker.models.user import User


class UserRepository:
    """Typed access to the users table for one request session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        q = await self.session.execute(select(User).filter_by(id=user_id))
        return q.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        q = await self.session.execute(select(User).filter_by(username=username))
        return q.scalars().first()

    async def username_exists(self, username: str) -> bool:
        q = await self.session.execute(select(User.id).filter_by(username=username).limit(1))
        return q.first() is not None

    async def add(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        return user
