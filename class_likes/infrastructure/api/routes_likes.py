"""Likes endpoints — read all counts, like / unlike one class."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from class_likes.application.use_cases.get_likes import GetLikesUseCase
from class_likes.application.use_cases.mutate_like import MutateLikeUseCase
from class_likes.infrastructure.api.dependencies import get_likes_uc, get_mutate_like_uc
from class_likes.infrastructure.api.schemas import LikeRequest, LikesOut, MutationOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/likes", tags=["likes"])


@router.get("", response_model=LikesOut)
async def get_likes(uc: GetLikesUseCase = Depends(get_likes_uc)):
    """Every known classId with its count. Always 200 (possibly empty)."""
    likes = await uc.execute()
    return {"likes": likes}


@router.post("", response_model=MutationOut, response_model_exclude_none=True)
async def mutate_like(payload: LikeRequest, uc: MutateLikeUseCase = Depends(get_mutate_like_uc)):
    """Apply a like/unlike and return the authoritative count.

    A backend failure is reported as ``success: false`` with the best-known
    count, not as a 5xx.
    """
    try:
        result = await uc.execute(payload.class_id, payload.action)
    except Exception:
        logger.exception("Unexpected error updating likes for '%s'", payload.class_id)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    return {"success": result.success, "count": result.count, "error": result.error}
