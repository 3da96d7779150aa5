# habit_tracker/repositories/habit_repository.py
import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from habit_tracker.models.habit import Habit, HabitEntry


class HabitRepository:
    """
    Typed access to habits and their entries for one request session.

    Habit lookups always filter on the owner inside the query, so a habit
    that belongs to someone else is indistinguishable from a missing one.
    Every mutating call commits before returning.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_habit(self, name: str, owner_user_id: int) -> Habit:
        # entries=[] marks the collection as loaded; no lazy load after commit
        habit = Habit(name=name, owner_user_id=owner_user_id, entries=[])
        self.session.add(habit)
        await self.session.commit()
        return habit

    async def list_for_owner(self, owner_user_id: int) -> List[Habit]:
        q = await self.session.execute(
            select(Habit).options(selectinload(Habit.entries)).filter_by(owner_user_id=owner_user_id)
        )
        return list(q.scalars().all())

    async def get_owned(self, habit_id: int, owner_user_id: int, with_entries: bool = False) -> Optional[Habit]:
        stmt = select(Habit).filter_by(id=habit_id, owner_user_id=owner_user_id)
        if with_entries:
            stmt = stmt.options(selectinload(Habit.entries))
        q = await self.session.execute(stmt)
        return q.scalars().first()

    async def save(self, habit: Habit) -> Habit:
        self.session.add(habit)
        await self.session.commit()
        return habit

    async def delete(self, habit: Habit) -> None:
        # entries go with it through ON DELETE CASCADE
        await self.session.delete(habit)
        await self.session.commit()

    async def entry_exists(self, habit_id: int, date: datetime.date) -> bool:
        q = await self.session.execute(
            select(HabitEntry.id).filter_by(owner_habit_id=habit_id, date=date).limit(1)
        )
        return q.first() is not None

    async def add_entry(self, habit_id: int, date: datetime.date, completed: bool) -> HabitEntry:
        entry = HabitEntry(owner_habit_id=habit_id, date=date, completed=completed)
        self.session.add(entry)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        return entry

    async def list_entries(self, habit_id: int) -> List[HabitEntry]:
        q = await self.session.execute(
            select(HabitEntry).filter_by(owner_habit_id=habit_id).order_by(HabitEntry.date)
        )
        return list(q.scalars().all())
