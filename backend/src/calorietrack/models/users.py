from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from calorietrack.core.clock import utc_now


class Sex(str, Enum):
    male = "MALE"
    female = "FEMALE"


class ActivityLevel(str, Enum):
    sedentary = "SEDENTARY"
    lightly_active = "LIGHTLY_ACTIVE"
    moderately_active = "MODERATELY_ACTIVE"
    very_active = "VERY_ACTIVE"


class GoalType(str, Enum):
    lose = "LOSE"
    maintain = "MAINTAIN"
    gain = "GAIN"


class UserBase(SQLModel):
    name: str = Field(max_length=100)
    email: str = Field(max_length=100, index=True, unique=True)
    dob: date
    sex: Sex
    weight: float = Field(gt=0)
    height: float = Field(gt=0)
    activity_level: ActivityLevel
    goal: Optional[float] = Field(default=None, gt=0, description="target weight in kg")
    goal_type: GoalType
    weekly_goal: float = Field(default=0.5, ge=0, le=2.0, description="kg per week")


class User(UserBase, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    allowed_daily_intake: int = 0
    bmi: float = 0.0
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class UserCreate(UserBase):
    pass


class UserRead(UserBase):
    id: int
    allowed_daily_intake: int
    bmi: float
    created_at: datetime


class UserUpdate(SQLModel):
    # email is the login identity and stays fixed
    name: Optional[str] = Field(default=None, max_length=100)
    dob: Optional[date] = None
    sex: Optional[Sex] = None
    weight: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    activity_level: Optional[ActivityLevel] = None
    goal: Optional[float] = Field(default=None, gt=0)
    goal_type: Optional[GoalType] = None
    weekly_goal: Optional[float] = Field(default=None, ge=0, le=2.0)
