# habit_tracker/routers/profile.py
from fastapi import APIRouter, Depends
from habit_tracker.deps import get_current_user
from habit_tracker.models.user import User
from habit_tracker.routers.auth import UserOut

router = APIRouter(tags=["profile"])

@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    # Return safe user info (no hashes)
    return UserOut(id=current_user.id, username=current_user.username)
