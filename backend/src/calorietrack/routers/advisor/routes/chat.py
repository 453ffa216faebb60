from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import ChatRequest, ChatResponse
from ..services import AdvisorService, get_advisor_service, require_user

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def advisor_chat(
    payload: ChatRequest,
    user_id: int = Depends(require_user),
    service: AdvisorService = Depends(get_advisor_service),
):
    return service.chat(user_id, payload.message, payload.history)
