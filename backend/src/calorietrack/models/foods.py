from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from calorietrack.core.clock import utc_now


class MealType(str, Enum):
    breakfast = "BREAKFAST"
    lunch = "LUNCH"
    snacks = "SNACKS"
    dinner = "DINNER"
    other = "OTHER"


class Food(SQLModel, table=True):
    __tablename__ = "foods"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=100)
    meal_type: MealType = Field(default=MealType.other)
    calories: int = Field(default=0, ge=0)
    # System foods have no owner; custom foods belong to the user who logged them.
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
