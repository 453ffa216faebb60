from __future__ import annotations

from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from calorietrack.core.clock import get_clock
from calorietrack.core.database import get_session
from calorietrack.models.users import GoalType, User, UserCreate, UserRead, UserUpdate
from calorietrack.utils.nutrition import derive_metrics, goal_type_for

router = APIRouter(prefix="/users", tags=["users"])


def apply_derived_metrics(user: User, now: datetime) -> User:
    """Recompute BMI and daily calorie allowance from the stored profile."""
    metrics = derive_metrics(
        weight_kg=user.weight,
        height_cm=user.height,
        dob=user.dob,
        sex=user.sex,
        activity_level=user.activity_level,
        weekly_goal_kg=user.weekly_goal,
        goal_type=user.goal_type,
        today=now.date(),
    )
    user.bmi = metrics.bmi
    user.allowed_daily_intake = metrics.allowed_daily_intake
    user.updated_at = now
    return user


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    if session.exec(select(User).where(User.email == payload.email)).first():
        raise HTTPException(status_code=409, detail=f"Email '{payload.email}' already registered")

    now = clock()
    user = apply_derived_metrics(User(**payload.model_dump(), created_at=now), now)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise HTTPException(status_code=409, detail=f"Constraint error: {str(e.orig)}")
    session.refresh(user)
    return user


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, session: Session = Depends(get_session)):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, f"User {user_id} not found")
    return user


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Partial profile update. BMI and allowance are recomputed; when a target
    weight is known and no goal type is sent, the goal type follows from
    target vs. current weight.
    """
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, f"User {user_id} not found")

    # only the target weight may be cleared explicitly
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field == "goal"
    }
    for field, value in changes.items():
        setattr(user, field, value)

    if "goal_type" not in changes and user.goal is not None and {"goal", "weight"} & changes.keys():
        user.goal_type = GoalType(goal_type_for(user.weight, user.goal))

    apply_derived_metrics(user, clock())
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
