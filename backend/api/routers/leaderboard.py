"""
Leaderboard router — quiz battle scores and XP profiles.

Endpoints:
- GET  /leaderboard               — Top scores, highest first
- POST /scores                    — Record a finished game
- POST /profiles/{user_id}/xp     — Add XP to a profile
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from backend import db_connection
from configs import LEADERBOARD_LIMIT

from ..schemas import (
    LeaderboardEntry,
    LeaderboardResponse,
    ScoreRequest,
    XPRequest,
    XPResponse,
)
from ..deps import logger


router = APIRouter(tags=["Leaderboard"])


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(limit: Optional[int] = Query(None, ge=1, le=100)):
    """Top scores across all players."""
    try:
        rows = await asyncio.to_thread(db_connection.get_leaderboard, limit or LEADERBOARD_LIMIT)
    except Exception:
        logger.exception("Failed to load leaderboard")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Leaderboard is unavailable",
        )
    return LeaderboardResponse(entries=[LeaderboardEntry(**row) for row in rows])


@router.post("/scores", status_code=status.HTTP_201_CREATED)
async def submit_score(request: ScoreRequest):
    try:
        await asyncio.to_thread(
            db_connection.save_score,
            request.user_id, request.username, request.score, request.game_mode,
        )
    except Exception:
        logger.exception("Failed to save score for %s", request.user_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not save score",
        )
    return {"saved": True}


@router.post("/profiles/{user_id}/xp", response_model=XPResponse)
async def add_xp(user_id: str, request: XPRequest):
    try:
        total = await asyncio.to_thread(
            db_connection.update_user_xp, user_id, request.xp, request.username
        )
    except Exception:
        logger.exception("Failed to update XP for %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not update XP",
        )
    return XPResponse(user_id=user_id, total_xp=total)
