from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from calorietrack.core.clock import utc_now


class ArtifactBase(SQLModel):
    """Generated advisory text (plan or review); at most one row per user."""

    user_id: int = Field(foreign_key="users.id", index=True, unique=True)
    text: str
    # Time of the last successful generation; the staleness policy reads this.
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Plan(ArtifactBase, table=True):
    __tablename__ = "plans"

    id: Optional[int] = Field(default=None, primary_key=True)


class Review(ArtifactBase, table=True):
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
