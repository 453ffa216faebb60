from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session, func, select

from calorietrack.core.clock import get_clock
from calorietrack.core.database import get_session
from calorietrack.models.foods import Food
from calorietrack.models.meals import MealEntry
from calorietrack.models.users import User
from calorietrack.models.weights import WeightEntry
from calorietrack.utils.nutrition import derive_metrics

from .advisor.services import require_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

# ----------------------------
# Pydantic Schemas
# ----------------------------

class DashboardMeal(BaseModel):
    id: int
    entry_time: str
    food_name: str
    calories: int


class EnergyMetrics(BaseModel):
    bmi: float
    bmr: float
    tdee: int
    allowed_daily_intake: int


class DashboardResponse(BaseModel):
    day: date
    user_name: str
    goal_type: str
    allowed_daily_intake: int
    consumed_calories: int
    remaining_calories: int
    current_weight: float
    goal_weight: Optional[float] = None
    today_weight: Optional[float] = None
    meals_by_type: Dict[str, List[DashboardMeal]]
    total_meals_count: int
    metrics: EnergyMetrics


# ----------------------------
# Helpers
# ----------------------------

def _consumed_for_day(session: Session, user_id: int, day: date) -> int:
    stmt = (
        select(func.coalesce(func.sum(Food.calories), 0))
        .select_from(MealEntry)
        .join(Food, Food.id == MealEntry.food_id)
        .where(MealEntry.user_id == user_id, MealEntry.entry_date == day)
    )
    return int(session.exec(stmt).one() or 0)


def _meals_by_type(session: Session, user_id: int, day: date) -> Dict[str, List[DashboardMeal]]:
    entries = session.exec(
        select(MealEntry)
        .where(MealEntry.user_id == user_id, MealEntry.entry_date == day)
        .order_by(MealEntry.entry_time.asc(), MealEntry.id.asc())
    ).all()

    grouped: Dict[str, List[DashboardMeal]] = {}
    for entry in entries:
        meal_type = str(getattr(entry.food.meal_type, "value", entry.food.meal_type))
        grouped.setdefault(meal_type, []).append(
            DashboardMeal(
                id=entry.id,
                entry_time=entry.entry_time.strftime("%H:%M"),
                food_name=entry.food.name,
                calories=int(entry.food.calories or 0),
            )
        )
    return grouped


# ----------------------------
# Endpoint: /dashboard
# ----------------------------

@router.get("", response_model=DashboardResponse)
def get_dashboard(
    day: Optional[date] = Query(default=None),
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Calorie budget, meals grouped by meal type and weight for one day (default: today)."""
    today = clock().date()
    day = day or today
    user = session.get(User, user_id)

    consumed = _consumed_for_day(session, user_id, day)
    today_weight = session.exec(
        select(WeightEntry.weight).where(WeightEntry.user_id == user_id, WeightEntry.entry_date == day)
    ).first()
    meals = _meals_by_type(session, user_id, day)

    metrics = derive_metrics(
        weight_kg=user.weight,
        height_cm=user.height,
        dob=user.dob,
        sex=user.sex,
        activity_level=user.activity_level,
        weekly_goal_kg=user.weekly_goal,
        goal_type=user.goal_type,
        today=today,
    )

    return DashboardResponse(
        day=day,
        user_name=user.name,
        goal_type=str(getattr(user.goal_type, "value", user.goal_type)),
        allowed_daily_intake=user.allowed_daily_intake,
        consumed_calories=consumed,
        remaining_calories=user.allowed_daily_intake - consumed,
        current_weight=user.weight,
        goal_weight=user.goal,
        today_weight=today_weight,
        meals_by_type=meals,
        total_meals_count=sum(len(items) for items in meals.values()),
        metrics=EnergyMetrics(**metrics.to_dict()),
    )
