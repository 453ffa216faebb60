from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from fastapi import Depends, HTTPException, Query
from sqlmodel import Session

from calorietrack.core.clock import as_utc, get_clock, utc_now
from calorietrack.core.database import get_session
from calorietrack.models.artifacts import Plan, Review
from calorietrack.models.users import User

from .config import ARTIFACT_MAX_AGE, HISTORY_CHAR_BUDGET
from .history import build_meal_history, build_weight_history, meal_window, weight_window
from .llm import (
    NO_RESPONSE,
    UNPARSEABLE_RESPONSE,
    AdvisorLLMError,
    GeminiClient,
    extract_first_candidate_text,
    get_llm_client,
)
from .memory import truncate_conversation
from .prompts import assemble_chat_prompt, assemble_plan_prompt, assemble_review_prompt
from .providers import (
    ArtifactRepository,
    get_meal_records,
    get_profile_snapshot,
    get_stored_plan_text,
    get_weight_records,
)
from .schemas import (
    ArtifactResponse,
    ChatResponse,
    ConversationTurn,
    PlanPageResponse,
    ProfileSnapshot,
    PromptTurn,
)
from .staleness import plan_regeneration

logger = logging.getLogger(__name__)

CHAT_APOLOGY = (
    "I apologize, but I'm unable to process your request at the moment. Please try again later."
)
PLAN_APOLOGY = (
    "I apologize, but I'm unable to generate your meal plan at the moment. Please try again later."
)
REVIEW_APOLOGY = (
    "I apologize, but I'm unable to generate your review at the moment. Please try again later."
)

_SENTINELS = (NO_RESPONSE, UNPARSEABLE_RESPONSE)


@dataclass(frozen=True)
class HistoryContext:
    profile: Optional[ProfileSnapshot]
    meal_block: str
    weight_block: str


def _as_response(row) -> ArtifactResponse:
    if row is None:
        return ArtifactResponse()
    return ArtifactResponse(text=row.text, created_at=as_utc(row.created_at))


class AdvisorService:
    """Chat, meal plan and progress review on top of the user's logged history.

    Every call reads a fresh profile snapshot and history window, builds the
    prompt and does exactly one round trip to the text-generation client.
    Client failures never escape: chat answers with an apology, plan/review
    return their apology text and leave stored artifacts untouched.
    """

    def __init__(
        self,
        session: Session,
        client: GeminiClient,
        clock: Callable[[], datetime] = utc_now,
        history_budget: float = HISTORY_CHAR_BUDGET,
        max_age: timedelta = ARTIFACT_MAX_AGE,
    ):
        self.session = session
        self.client = client
        self.clock = clock
        self.history_budget = history_budget
        self.max_age = max_age
        self.plans = ArtifactRepository(session, Plan)
        self.reviews = ArtifactRepository(session, Review)

    def collect_context(self, user_id: int, now: datetime) -> HistoryContext:
        today = now.date()
        meal_start, meal_end = meal_window(today)
        weight_start, weight_end = weight_window(today)
        return HistoryContext(
            profile=get_profile_snapshot(self.session, user_id, today),
            meal_block=build_meal_history(get_meal_records(self.session, user_id, meal_start, meal_end)),
            weight_block=build_weight_history(
                get_weight_records(self.session, user_id, weight_start, weight_end)
            ),
        )

    def _generate_text(self, turns: Sequence[PromptTurn]) -> str:
        raw = self.client.send_prompt(turns)
        text = extract_first_candidate_text(raw)
        if not text.strip():
            logger.warning("Gemini returned an empty candidate text")
            return NO_RESPONSE
        return text

    # ----------------------------
    # Chat
    # ----------------------------

    def chat(self, user_id: int, message: str, history: Sequence[ConversationTurn] = ()) -> ChatResponse:
        now = self.clock()
        ctx = self.collect_context(user_id, now)
        kept = truncate_conversation(list(history), self.history_budget)
        logger.debug("Advice chat for user %s: %d/%d history turns kept", user_id, len(kept), len(history))

        turns = assemble_chat_prompt(ctx.profile, ctx.meal_block, ctx.weight_block, kept, message)
        try:
            text = self._generate_text(turns)
        except AdvisorLLMError as exc:
            logger.error("Error calling Gemini API: %s", exc, exc_info=True)
            text = CHAT_APOLOGY
        return ChatResponse(message=message, response=text)

    # ----------------------------
    # Plan / Review
    # ----------------------------

    def _generate_artifact(
        self,
        repo: ArtifactRepository,
        user_id: int,
        turns: Sequence[PromptTurn],
        apology: str,
        now: datetime,
    ) -> ArtifactResponse:
        try:
            text = self._generate_text(turns)
        except AdvisorLLMError as exc:
            logger.error("Error calling Gemini API: %s", exc, exc_info=True)
            return ArtifactResponse(text=apology)

        if text in _SENTINELS:
            # Nothing usable came back; keep whatever is stored.
            return ArtifactResponse(text=text)

        row = repo.upsert(user_id, text, now)
        logger.info("Stored %s for user %s", repo.model.__name__.lower(), user_id)
        return _as_response(row)

    def generate_plan(self, user_id: int) -> ArtifactResponse:
        now = self.clock()
        ctx = self.collect_context(user_id, now)
        turns = assemble_plan_prompt(ctx.profile, ctx.meal_block, ctx.weight_block)
        return self._generate_artifact(self.plans, user_id, turns, PLAN_APOLOGY, now)

    def generate_review(self, user_id: int, plan_text: Optional[str] = None) -> ArtifactResponse:
        now = self.clock()
        ctx = self.collect_context(user_id, now)
        if plan_text is None:
            plan_text = get_stored_plan_text(self.session, user_id)
        turns = assemble_review_prompt(ctx.profile, ctx.meal_block, ctx.weight_block, plan_text)
        return self._generate_artifact(self.reviews, user_id, turns, REVIEW_APOLOGY, now)

    def get_plan(self, user_id: int) -> ArtifactResponse:
        return _as_response(self.plans.get(user_id))

    def get_review(self, user_id: int) -> ArtifactResponse:
        return _as_response(self.reviews.get(user_id))

    def delete_review(self, user_id: int) -> bool:
        return self.reviews.delete(user_id)

    # ----------------------------
    # Plan page visit
    # ----------------------------

    def visit_plan_page(self, user_id: int) -> PlanPageResponse:
        plan = self.plans.get(user_id)
        decision = plan_regeneration(
            plan.text if plan else None,
            plan.created_at if plan else None,
            self.clock(),
            self.max_age,
        )

        review_generated = False
        if decision.review_first:
            # Review the outgoing plan before it gets overwritten.
            review = self.generate_review(user_id, plan_text=plan.text)
            review_generated = review.created_at is not None

        if decision.regenerate_plan:
            plan_response = self.generate_plan(user_id)
        else:
            plan_response = _as_response(plan)

        return PlanPageResponse(
            plan=plan_response,
            review=self.get_review(user_id),
            plan_regenerated=decision.regenerate_plan and plan_response.created_at is not None,
            review_generated=review_generated,
        )


def require_user(
    user_id: int = Query(..., ge=1),
    session: Session = Depends(get_session),
) -> int:
    if session.get(User, user_id) is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user_id


def get_advisor_service(
    session: Session = Depends(get_session),
    client: GeminiClient = Depends(get_llm_client),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> AdvisorService:
    return AdvisorService(session=session, client=client, clock=clock)
