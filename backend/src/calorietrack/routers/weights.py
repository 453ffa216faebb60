from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from calorietrack.core.clock import get_clock
from calorietrack.core.database import get_session
from calorietrack.models.users import User
from calorietrack.models.weights import WeightEntry, WeightEntryRead, WeightEntryUpsert

from .advisor.services import require_user
from .users import apply_derived_metrics

router = APIRouter(prefix="/weights", tags=["weights"])


def _latest_entry(session: Session, user_id: int) -> Optional[WeightEntry]:
    return session.exec(
        select(WeightEntry)
        .where(WeightEntry.user_id == user_id)
        .order_by(WeightEntry.entry_date.desc())
    ).first()


def _sync_profile_weight(session: Session, user_id: int, weight: float, now: datetime) -> None:
    user = session.get(User, user_id)
    user.weight = weight
    apply_derived_metrics(user, now)
    session.add(user)


@router.post(
    "",
    response_model=WeightEntryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create/update a weight entry (upsert: unique by user + date)",
)
def upsert_weight(
    payload: WeightEntryUpsert,
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Upsert by (user_id, entry_date):
    - existing entry -> overwrite weight
    - otherwise -> create
    When the entry is the user's most recent one, the profile weight (and with
    it BMI and daily allowance) follows.
    """
    now = clock()
    try:
        row = session.exec(
            select(WeightEntry).where(
                WeightEntry.user_id == user_id,
                WeightEntry.entry_date == payload.entry_date,
            )
        ).first()

        if row:
            row.weight = payload.weight
        else:
            row = WeightEntry(
                user_id=user_id,
                entry_date=payload.entry_date,
                weight=payload.weight,
                created_at=now,
            )
        session.add(row)
        session.flush()

        latest = _latest_entry(session, user_id)
        if latest is not None and latest.id == row.id:
            _sync_profile_weight(session, user_id, payload.weight, now)

        session.commit()
        session.refresh(row)
        return row

    except IntegrityError as e:
        session.rollback()
        raise HTTPException(status_code=409, detail=f"Constraint error: {str(e.orig)}")
    except OperationalError as e:
        session.rollback()
        raise HTTPException(status_code=500, detail=f"DB error: {str(e.orig)}")


@router.get("", response_model=List[WeightEntryRead])
def list_weights(
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(WeightEntry)
        .where(WeightEntry.user_id == user_id)
        .order_by(WeightEntry.entry_date.asc())
    ).all()


@router.get("/latest", response_model=WeightEntryRead)
def latest_weight(
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
):
    row = _latest_entry(session, user_id)
    if row is None:
        raise HTTPException(404, "No weight entries found")
    return row


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_weight(
    entry_id: int,
    user_id: int = Depends(require_user),
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Delete one entry; the profile weight falls back to the new latest entry, if any."""
    row = session.get(WeightEntry, entry_id)
    if not row or row.user_id != user_id:
        raise HTTPException(404, f"Weight entry {entry_id} not found")

    session.delete(row)
    session.flush()

    latest = _latest_entry(session, user_id)
    if latest is not None:
        _sync_profile_weight(session, user_id, latest.weight, clock())

    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
