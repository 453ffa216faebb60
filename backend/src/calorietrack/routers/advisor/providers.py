from __future__ import annotations

from datetime import date, datetime
from typing import Generic, List, Optional, Type, TypeVar

from sqlmodel import Session, select

from calorietrack.models.artifacts import Plan, Review
from calorietrack.models.foods import Food
from calorietrack.models.meals import MealEntry
from calorietrack.models.users import User
from calorietrack.models.weights import WeightEntry
from calorietrack.utils.nutrition import age_on

from .schemas import MealRecord, ProfileSnapshot, WeightRecord

A = TypeVar("A", Plan, Review)


def _enum_name(value) -> str:
    return str(getattr(value, "value", value))


def get_profile_snapshot(session: Session, user_id: int, today: date) -> Optional[ProfileSnapshot]:
    user = session.get(User, user_id)
    if user is None:
        return None
    return ProfileSnapshot(
        name=user.name,
        age=age_on(user.dob, today),
        sex=_enum_name(user.sex),
        height_cm=float(user.height),
        weight_kg=float(user.weight),
        bmi=float(user.bmi or 0.0),
        activity_level=_enum_name(user.activity_level),
        goal_type=_enum_name(user.goal_type),
        goal_weight_kg=float(user.goal) if user.goal is not None else None,
        weekly_goal_kg=float(user.weekly_goal or 0.0),
        daily_allowance=int(user.allowed_daily_intake or 0),
    )


def get_meal_records(session: Session, user_id: int, start: date, end: date) -> List[MealRecord]:
    rows = session.exec(
        select(MealEntry.entry_date, MealEntry.entry_time, Food.name, Food.calories)
        .select_from(MealEntry)
        .join(Food, Food.id == MealEntry.food_id)
        .where(MealEntry.user_id == user_id)
        .where(MealEntry.entry_date >= start, MealEntry.entry_date <= end)
        .order_by(MealEntry.entry_date.asc(), MealEntry.entry_time.asc(), MealEntry.id.asc())
    ).all()
    return [
        MealRecord(entry_date=d, entry_time=t, food_name=name, calories=int(kcal or 0))
        for d, t, name, kcal in rows
    ]


def get_weight_records(session: Session, user_id: int, start: date, end: date) -> List[WeightRecord]:
    rows = session.exec(
        select(WeightEntry)
        .where(WeightEntry.user_id == user_id)
        .where(WeightEntry.entry_date >= start, WeightEntry.entry_date <= end)
        .order_by(WeightEntry.entry_date.asc())
    ).all()
    return [WeightRecord(entry_date=row.entry_date, weight_kg=float(row.weight)) for row in rows]


class ArtifactRepository(Generic[A]):
    """Upsert-by-user storage shared by plans and reviews."""

    def __init__(self, session: Session, model: Type[A]):
        self.session = session
        self.model = model

    def get(self, user_id: int) -> Optional[A]:
        return self.session.exec(select(self.model).where(self.model.user_id == user_id)).first()

    def upsert(self, user_id: int, text: str, now: datetime) -> A:
        row = self.get(user_id)
        if row is None:
            row = self.model(user_id=user_id, text=text, created_at=now, updated_at=now)
        else:
            row.text = text
            # Regeneration restarts the staleness clock.
            row.created_at = now
            row.updated_at = now
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def delete(self, user_id: int) -> bool:
        row = self.get(user_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.commit()
        return True


def get_stored_plan_text(session: Session, user_id: int) -> Optional[str]:
    plan = ArtifactRepository(session, Plan).get(user_id)
    return plan.text if plan else None
