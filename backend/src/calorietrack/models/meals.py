from datetime import date, datetime, time
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from calorietrack.core.clock import utc_now

from .foods import Food


class MealEntry(SQLModel, table=True):
    __tablename__ = "meal_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    food_id: int = Field(foreign_key="foods.id", index=True)
    entry_date: date = Field(index=True)
    entry_time: time
    created_at: datetime = Field(default_factory=utc_now, index=True)

    food: Optional[Food] = Relationship()
