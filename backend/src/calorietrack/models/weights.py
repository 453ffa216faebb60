from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel, UniqueConstraint

from calorietrack.core.clock import utc_now


class WeightEntry(SQLModel, table=True):
    __tablename__ = "weight_entries"
    __table_args__ = (UniqueConstraint("user_id", "entry_date", name="uq_user_entry_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    entry_date: date = Field(index=True)
    weight: float = Field(gt=0)
    created_at: datetime = Field(default_factory=utc_now)


class WeightEntryUpsert(SQLModel):
    entry_date: date
    weight: float = Field(gt=0, le=500)


class WeightEntryRead(SQLModel):
    id: int
    entry_date: date
    weight: float
