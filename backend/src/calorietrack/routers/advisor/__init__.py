from __future__ import annotations

from fastapi import APIRouter

from .routes import chat, plan, review

router = APIRouter(prefix="/advisor", tags=["advisor"])

router.include_router(chat.router)
router.include_router(plan.router)
router.include_router(review.router)

__all__ = ["router"]
