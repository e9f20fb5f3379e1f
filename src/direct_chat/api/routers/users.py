from __future__ import annotations

from fastapi import APIRouter, Query

from direct_chat.api.deps import CurrentPrincipal, UoWDep
from direct_chat.api.schemas.common import Envelope
from direct_chat.api.schemas.user import UserSummaryResponse
from direct_chat.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/search", response_model=Envelope[list[UserSummaryResponse]])
async def search_users(
    principal: CurrentPrincipal,
    uow: UoWDep,
    q: str = Query(..., min_length=1, max_length=100),
) -> Envelope[list[UserSummaryResponse]]:
    users = await user_service.search_users(principal, q, uow)
    return Envelope(
        message="Users retrieved successfully",
        data=[UserSummaryResponse.model_validate(u, from_attributes=True) for u in users],
    )
