"""
System router — health check.

Endpoints:
- GET /health    — Health check (always available)
"""

import asyncio

from fastapi import APIRouter

from backend import db_connection
from configs import GEMINI_MODEL

from ..schemas import HealthResponse
from ..deps import get_key_pool


router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report key pool and database status. Keys are masked."""
    pool = get_key_pool()
    db_info = await asyncio.to_thread(db_connection.test_connection)

    return HealthResponse(
        status="healthy",
        version="1.0.0",
        model=GEMINI_MODEL,
        key_count=pool.size,
        keys=pool.masked_keys(),
        database_connected=db_info.get("connected", False),
        db_type=db_info.get("db_type"),
    )
