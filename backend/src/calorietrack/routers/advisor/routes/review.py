from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import ArtifactResponse
from ..services import AdvisorService, get_advisor_service, require_user

router = APIRouter(prefix="/review")


@router.get("", response_model=ArtifactResponse)
def get_review(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    return service.get_review(user_id)


@router.post("/generate", response_model=ArtifactResponse)
def generate_review(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    return service.generate_review(user_id)


@router.delete("")
def delete_review(
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    deleted = service.delete_review(user_id)
    return {"message": "Review deleted successfully", "deleted": deleted}
