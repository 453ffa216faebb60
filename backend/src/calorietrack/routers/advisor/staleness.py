from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from calorietrack.core.clock import as_utc

from .config import ARTIFACT_MAX_AGE


class ArtifactState(str, Enum):
    absent = "absent"
    fresh = "fresh"
    stale = "stale"


@dataclass(frozen=True)
class RegenerationDecision:
    regenerate_plan: bool
    review_first: bool


def artifact_state(
    text: Optional[str],
    created_at: Optional[datetime],
    now: datetime,
    max_age: timedelta = ARTIFACT_MAX_AGE,
) -> ArtifactState:
    if not text:
        return ArtifactState.absent
    # A stored text without a timestamp cannot be proven fresh.
    if created_at is None or as_utc(now) - as_utc(created_at) >= max_age:
        return ArtifactState.stale
    return ArtifactState.fresh


def plan_regeneration(
    plan_text: Optional[str],
    plan_created_at: Optional[datetime],
    now: datetime,
    max_age: timedelta = ARTIFACT_MAX_AGE,
) -> RegenerationDecision:
    """
    absent -> new plan, no review (nothing to review yet)
    stale  -> review of the outgoing plan first, then a new plan
    fresh  -> nothing to generate
    """
    state = artifact_state(plan_text, plan_created_at, now, max_age)
    if state is ArtifactState.fresh:
        return RegenerationDecision(regenerate_plan=False, review_first=False)
    return RegenerationDecision(
        regenerate_plan=True,
        review_first=state is ArtifactState.stale,
    )
