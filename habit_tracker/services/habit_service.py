# habit_tracker/services/habit_service.py
import datetime
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from habit_tracker.models.habit import Habit, HabitEntry
from habit_tracker.repositories.habit_repository import HabitRepository

logger = logging.getLogger("habit_tracker.habit_service")


class DuplicateEntryError(Exception):
    """An entry for this habit and date already exists."""

    def __init__(self, habit_id: int, date: datetime.date):
        super().__init__(f"Habit {habit_id} already has an entry for {date.isoformat()}")
        self.habit_id = habit_id
        self.date = date


class HabitService:
    """
    Habit operations on behalf of one authenticated caller.

    Anything the caller does not own is reported exactly like a missing
    habit: None from lookups, False from mutations.
    """

    def __init__(self, habits: HabitRepository, caller_user_id: int):
        self.habits = habits
        self.caller_user_id = caller_user_id

    async def create(self, name: str) -> Habit:
        habit = await self.habits.add_habit(name, self.caller_user_id)
        logger.info(f"User {self.caller_user_id} created habit {habit.id}")
        return habit

    async def list(self) -> List[Habit]:
        return await self.habits.list_for_owner(self.caller_user_id)

    async def get(self, habit_id: int) -> Optional[Habit]:
        return await self.habits.get_owned(habit_id, self.caller_user_id, with_entries=True)

    async def update(self, habit_id: int, name: str) -> bool:
        habit = await self.habits.get_owned(habit_id, self.caller_user_id)
        if habit is None:
            return False
        habit.name = name
        await self.habits.save(habit)
        return True

    async def delete(self, habit_id: int) -> bool:
        habit = await self.habits.get_owned(habit_id, self.caller_user_id)
        if habit is None:
            return False
        await self.habits.delete(habit)
        logger.info(f"User {self.caller_user_id} deleted habit {habit_id}")
        return True

    async def add_entry(self, habit_id: int, date: datetime.date, completed: bool) -> Optional[HabitEntry]:
        habit = await self.habits.get_owned(habit_id, self.caller_user_id)
        if habit is None:
            return None
        if await self.habits.entry_exists(habit_id, date):
            raise DuplicateEntryError(habit_id, date)
        try:
            return await self.habits.add_entry(habit_id, date, completed)
        except IntegrityError:
            raise DuplicateEntryError(habit_id, date)

    async def list_entries(self, habit_id: int) -> Optional[List[HabitEntry]]:
        """Entries sorted by date, or None when the habit is missing or not the caller's."""
        habit = await self.habits.get_owned(habit_id, self.caller_user_id)
        if habit is None:
            return None
        return await self.habits.list_entries(habit_id)
