# habit_tracker/routers/habits.py
import datetime
import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from habit_tracker.deps import get_habit_service
from habit_tracker.services.habit_service import DuplicateEntryError, HabitService

router = APIRouter(prefix="/habits", tags=["habits"])
logger = logging.getLogger("habit_tracker.habits")


# --- Request / Response Models ---
class HabitIn(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class HabitEntryIn(BaseModel):
    date: datetime.date
    completed: bool

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, value):
        # clients may send a full timestamp; only the calendar day is kept
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return datetime.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


class HabitEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    habit_id: int = Field(validation_alias="owner_habit_id")
    date: datetime.date
    completed: bool


class HabitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    user_id: int = Field(validation_alias="owner_user_id")
    entries: List[HabitEntryOut] = []


def _not_found(detail: str = "Habit not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# --- Routes ---
@router.post("", response_model=HabitOut, status_code=status.HTTP_201_CREATED)
async def create_habit(payload: HabitIn, service: HabitService = Depends(get_habit_service)):
    logger.info(f"POST /habits | user={service.caller_user_id}")
    habit = await service.create(payload.name)
    return HabitOut.model_validate(habit)


@router.get("", response_model=List[HabitOut])
async def list_habits(service: HabitService = Depends(get_habit_service)):
    logger.info(f"GET /habits | user={service.caller_user_id}")
    habits = await service.list()
    return [HabitOut.model_validate(h) for h in habits]


@router.get("/{habit_id}", response_model=HabitOut)
async def get_habit(habit_id: int, service: HabitService = Depends(get_habit_service)):
    habit = await service.get(habit_id)
    if habit is None:
        raise _not_found()
    return HabitOut.model_validate(habit)


@router.put("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_habit(habit_id: int, payload: HabitIn, service: HabitService = Depends(get_habit_service)):
    logger.info(f"PUT /habits/{habit_id} | user={service.caller_user_id}")
    if not await service.update(habit_id, payload.name):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(habit_id: int, service: HabitService = Depends(get_habit_service)):
    logger.info(f"DELETE /habits/{habit_id} | user={service.caller_user_id}")
    if not await service.delete(habit_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{habit_id}/entries", response_model=HabitEntryOut, status_code=status.HTTP_201_CREATED)
async def add_habit_entry(habit_id: int, payload: HabitEntryIn, service: HabitService = Depends(get_habit_service)):
    logger.info(f"POST /habits/{habit_id}/entries | user={service.caller_user_id} | date={payload.date}")
    try:
        entry = await service.add_entry(habit_id, payload.date, payload.completed)
    except DuplicateEntryError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if entry is None:
        raise _not_found()
    return HabitEntryOut.model_validate(entry)


@router.get("/{habit_id}/entries", response_model=List[HabitEntryOut])
async def list_habit_entries(habit_id: int, service: HabitService = Depends(get_habit_service)):
    entries = await service.list_entries(habit_id)
    if entries is None:
        raise _not_found()
    return [HabitEntryOut.model_validate(e) for e in entries]
