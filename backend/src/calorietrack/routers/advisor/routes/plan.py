from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import ArtifactResponse, PlanPageResponse
from ..services import AdvisorService, get_advisor_service, require_user

router = APIRouter(prefix="/plan")


@router.get("", response_model=PlanPageResponse)
def plan_page(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    """
    Current meal plan. Missing or week-old plans are regenerated on the spot;
    a week-old plan is reviewed before it is replaced.
    """
    return service.visit_plan_page(user_id)


@router.get("/current", response_model=ArtifactResponse)
def get_plan(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    return service.get_plan(user_id)


@router.post("/generate", response_model=ArtifactResponse)
def generate_plan(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    return service.generate_plan(user_id)
