"""
History router — per-user session list and stored feature results.

Endpoints:
- GET    /history/{user_id}                          — Sessions, newest first
- PUT    /history/{user_id}/{session_id}             — Create or retitle a session
- DELETE /history/{user_id}/{session_id}             — Drop a session and its results
- GET    /history/{user_id}/{session_id}/{feature}   — Stored result of one feature
"""

from fastapi import APIRouter, HTTPException, status

from backend.utils.session_store import SESSION_FEATURES

from ..schemas import HistoryResponse, HistoryUpsertRequest
from ..deps import get_session_store, logger


router = APIRouter(prefix="/history", tags=["History"])


@router.get("/{user_id}", response_model=HistoryResponse)
async def list_history(user_id: str):
    items = await get_session_store().get_history(user_id)
    return HistoryResponse(items=items)


@router.put("/{user_id}/{session_id}", response_model=HistoryResponse)
async def upsert_session(user_id: str, session_id: str, request: HistoryUpsertRequest):
    items = await get_session_store().upsert_history(
        user_id, session_id, request.title, request.type
    )
    return HistoryResponse(items=items)


@router.delete("/{user_id}/{session_id}", response_model=HistoryResponse)
async def delete_session(user_id: str, session_id: str):
    items = await get_session_store().delete_session(user_id, session_id)
    logger.info("Deleted session %s for %s", session_id, user_id)
    return HistoryResponse(items=items)


@router.get("/{user_id}/{session_id}/{feature}")
async def load_result(user_id: str, session_id: str, feature: str):
    """Return the stored result blob as-is."""
    if feature not in SESSION_FEATURES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown feature '{feature}'",
        )
    data = await get_session_store().load_result(feature, user_id, session_id)
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No stored result for this session",
        )
    return data
