"""
EduVision FastAPI Application.

This module wires the routers together; no prompt or Gemini logic here.
Every feature call goes through the shared retry orchestrator in deps.

Endpoints:
- POST /exam/analyze, /camera/analyze, /professor/ask, /worksheets,
  /solver/messages, /notebook/analyze, /quiz/questions - Study features
- GET /leaderboard, POST /scores, POST /profiles/{user_id}/xp - Quiz battle
- /history/... - Session history and stored results
- GET /health - Health check
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from configs import ALLOWED_ORIGINS, GEMINI_MODEL, validate_configuration

from .deps import get_key_pool, get_session_store, logger
from .routers import features, history, leaderboard, system


# ============================================================
# APP LIFECYCLE
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    validate_configuration()
    pool = get_key_pool()
    if pool.size == 0:
        logger.warning("No Gemini API keys configured; feature calls will fail")
    logger.info("EduVision API started. Model: %s, keys: %d", GEMINI_MODEL, pool.size)
    await get_session_store().initialize()
    yield
    logger.info("EduVision API shutting down.")


# ============================================================
# FASTAPI APP
# ============================================================

app = FastAPI(
    title="EduVision API",
    description="Gemini-backed study tools with API key rotation",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if ALLOWED_ORIGINS != ["*"] else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(features.router)
app.include_router(leaderboard.router)
app.include_router(history.router)


# ============================================================
# RUN DIRECTLY (for development)
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
