import asyncio
import datetime
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from habit_tracker.services.habit_service import DuplicateEntryError, HabitService


class InMemoryHabits:
    """Stands in for HabitRepository; keeps habits and entries in dicts."""

    def __init__(self):
        self.habits = {}
        self.entries = []
        self.reject_next_insert = False

    async def add_habit(self, name, owner_user_id):
        habit = SimpleNamespace(id=len(self.habits) + 1, name=name, owner_user_id=owner_user_id, entries=[])
        self.habits[habit.id] = habit
        return habit

    async def list_for_owner(self, owner_user_id):
        return [h for h in self.habits.values() if h.owner_user_id == owner_user_id]

    async def get_owned(self, habit_id, owner_user_id, with_entries=False):
        habit = self.habits.get(habit_id)
        if habit is None or habit.owner_user_id != owner_user_id:
            return None
        return habit

    async def save(self, habit):
        return habit

    async def delete(self, habit):
        del self.habits[habit.id]
        self.entries = [e for e in self.entries if e.owner_habit_id != habit.id]

    async def entry_exists(self, habit_id, date):
        return any(e.owner_habit_id == habit_id and e.date == date for e in self.entries)

    async def add_entry(self, habit_id, date, completed):
        if self.reject_next_insert:
            self.reject_next_insert = False
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        entry = SimpleNamespace(id=len(self.entries) + 1, owner_habit_id=habit_id, date=date, completed=completed)
        self.entries.append(entry)
        self.habits[habit_id].entries.append(entry)
        return entry

    async def list_entries(self, habit_id):
        return sorted((e for e in self.entries if e.owner_habit_id == habit_id), key=lambda e: e.date)


@pytest.fixture
def repo():
    return InMemoryHabits()


def run(coro):
    return asyncio.run(coro)


def test_create_sets_owner(repo):
    habit = run(HabitService(repo, 1).create("Read"))
    assert habit.owner_user_id == 1
    assert habit.entries == []


def test_wrong_owner_sees_nothing(repo):
    alice, bob = HabitService(repo, 1), HabitService(repo, 2)
    habit = run(alice.create("Read"))
    day = datetime.date(2024, 1, 1)

    assert run(bob.get(habit.id)) is None
    assert run(bob.update(habit.id, "Mine now")) is False
    assert run(bob.delete(habit.id)) is False
    assert run(bob.add_entry(habit.id, day, True)) is None
    assert run(bob.list_entries(habit.id)) is None
    assert run(bob.list()) == []

    assert run(alice.get(habit.id)).name == "Read"
    assert repo.entries == []


def test_list_entries_distinguishes_missing_habit_from_empty(repo):
    service = HabitService(repo, 1)
    habit = run(service.create("Read"))
    assert run(service.list_entries(habit.id)) == []
    assert run(service.list_entries(999)) is None


def test_entries_sorted_by_date(repo):
    service = HabitService(repo, 1)
    habit = run(service.create("Read"))
    for day in (5, 1, 3):
        run(service.add_entry(habit.id, datetime.date(2024, 1, day), True))
    assert [e.date.day for e in run(service.list_entries(habit.id))] == [1, 3, 5]


def test_duplicate_date_rejected_before_insert(repo):
    service = HabitService(repo, 1)
    habit = run(service.create("Read"))
    day = datetime.date(2024, 1, 1)
    run(service.add_entry(habit.id, day, True))
    with pytest.raises(DuplicateEntryError) as exc:
        run(service.add_entry(habit.id, day, False))
    assert exc.value.habit_id == habit.id
    assert len(repo.entries) == 1


def test_storage_conflict_becomes_duplicate_entry_error(repo):
    service = HabitService(repo, 1)
    habit = run(service.create("Read"))
    repo.reject_next_insert = True
    with pytest.raises(DuplicateEntryError):
        run(service.add_entry(habit.id, datetime.date(2024, 1, 1), True))


def test_update_and_delete(repo):
    service = HabitService(repo, 1)
    habit = run(service.create("Run"))
    assert run(service.update(habit.id, "Run 5k")) is True
    assert run(service.get(habit.id)).name == "Run 5k"
    assert run(service.delete(habit.id)) is True
    assert run(service.get(habit.id)) is None
    assert run(service.delete(habit.id)) is False
