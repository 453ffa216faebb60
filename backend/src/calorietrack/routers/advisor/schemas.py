from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class ProfileSnapshot:
    name: str
    age: int
    sex: str
    height_cm: float
    weight_kg: float
    bmi: float
    activity_level: str
    goal_type: str
    goal_weight_kg: Optional[float]
    weekly_goal_kg: float
    daily_allowance: int


@dataclass(frozen=True)
class MealRecord:
    entry_date: date
    entry_time: time
    food_name: str
    calories: int


@dataclass(frozen=True)
class WeightRecord:
    entry_date: date
    weight_kg: float


@dataclass(frozen=True)
class PromptTurn:
    role: Literal["system", "user", "assistant"]
    text: str


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: Optional[str] = None


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, description="Current user question")
    history: List[ConversationTurn] = Field(
        default_factory=list,
        description="Prior turns of this chat session, oldest first.",
    )


class ChatResponse(BaseModel):
    message: str
    response: str


class ArtifactResponse(BaseModel):
    text: Optional[str] = None
    created_at: Optional[datetime] = None


class PlanPageResponse(BaseModel):
    plan: ArtifactResponse
    review: ArtifactResponse
    plan_regenerated: bool = False
    review_generated: bool = False
