from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlmodel import Session, select

from calorietrack.core.clock import get_clock
from calorietrack.core.database import get_session
from calorietrack.models.foods import Food, MealType
from calorietrack.models.meals import MealEntry

from .advisor.services import require_user

router = APIRouter(prefix="/meals", tags=["meals"])


class MealEntryCreate(BaseModel):
    entry_date: date
    entry_time: Optional[time] = None
    food_id: Optional[int] = None
    # Ad-hoc custom food when no catalog id is given
    food_name: Optional[str] = Field(default=None, max_length=100)
    calories: Optional[int] = Field(default=None, ge=0)
    meal_type: MealType = MealType.other


def _resolve_food(session: Session, payload: MealEntryCreate, user_id: int) -> Food:
    if payload.food_id is not None:
        food = session.get(Food, payload.food_id)
        if not food or (food.user_id is not None and food.user_id != user_id):
            raise HTTPException(404, f"Food {payload.food_id} not found")
        return food

    if not payload.food_name or payload.calories is None:
        raise HTTPException(422, "Either food_id or food_name + calories is required")

    food = Food(
        name=payload.food_name.strip(),
        calories=payload.calories,
        meal_type=payload.meal_type,
        user_id=user_id,
    )
    session.add(food)
    session.flush()
    return food


@router.post("", status_code=201)
def log_meal(
    payload: MealEntryCreate,
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Log one food at a date/time (time defaults to now, UTC)."""
    now = clock()
    food = _resolve_food(session, payload, user_id)
    entry = MealEntry(
        user_id=user_id,
        food_id=food.id,
        entry_date=payload.entry_date,
        entry_time=payload.entry_time or now.time().replace(microsecond=0),
        created_at=now,
    )
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return {
        "id": entry.id,
        "entry_date": entry.entry_date,
        "entry_time": entry.entry_time,
        "food": food.name,
        "calories": food.calories,
    }


@router.get("/day")
def get_day(
    day: date = Query(...),
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
):
    """All meals of one day in time order, plus the calorie total."""
    rows = session.exec(
        select(MealEntry.id, MealEntry.entry_time, Food.name, Food.calories, Food.meal_type)
        .select_from(MealEntry)
        .join(Food, Food.id == MealEntry.food_id)
        .where(MealEntry.user_id == user_id, MealEntry.entry_date == day)
        .order_by(MealEntry.entry_time.asc(), MealEntry.id.asc())
    ).all()

    items: List[Dict[str, Any]] = [
        {
            "id": entry_id,
            "entry_time": entry_time,
            "food_name": name,
            "calories": int(calories or 0),
            "meal_type": meal_type,
        }
        for entry_id, entry_time, name, calories, meal_type in rows
    ]
    return {"day": day, "items": items, "total_calories": sum(i["calories"] for i in items)}


@router.get("/range")
def get_range(
    start: date = Query(...),
    end: date = Query(...),
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Meals between two dates (inclusive), oldest first."""
    if start > end:
        raise HTTPException(422, "start must not be after end")

    entries = session.exec(
        select(MealEntry)
        .where(MealEntry.user_id == user_id)
        .where(MealEntry.entry_date >= start, MealEntry.entry_date <= end)
        .order_by(MealEntry.entry_date.asc(), MealEntry.entry_time.asc(), MealEntry.id.asc())
    ).all()
    return [
        {
            "id": entry.id,
            "entry_date": entry.entry_date,
            "entry_time": entry.entry_time,
            "food_name": entry.food.name,
            "calories": int(entry.food.calories or 0),
            "meal_type": entry.food.meal_type,
        }
        for entry in entries
    ]


@router.delete("/{entry_id}", status_code=204)
def delete_meal(
    entry_id: int,
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
):
    entry = session.get(MealEntry, entry_id)
    if not entry or entry.user_id != user_id:
        raise HTTPException(404, f"Meal entry {entry_id} not found")
    session.delete(entry)
    session.commit()
