# habit_tracker/models/habit.py
import sqlalchemy as sa
from sqlalchemy.orm import relationship
from habit_tracker.utils.database import Base


class Habit(Base):
    __tablename__ = "habits"
    id = sa.Column(sa.Integer, primary_key=True, autoincrement=True)
    name = sa.Column(sa.String(255), nullable=False)
    owner_user_id = sa.Column(
        sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = sa.Column(sa.DateTime(timezone=True), server_default=sa.func.now())
    entries = relationship(
        "HabitEntry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="HabitEntry.date",
    )


class HabitEntry(Base):
    __tablename__ = "habit_entries"
    __table_args__ = (
        sa.UniqueConstraint("owner_habit_id", "date", name="uq_habit_entries_habit_date"),
    )
    id = sa.Column(sa.Integer, primary_key=True, autoincrement=True)
    date = sa.Column(sa.Date, nullable=False)
    completed = sa.Column(sa.Boolean, nullable=False, default=False)
    owner_habit_id = sa.Column(
        sa.Integer, sa.ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True
    )
