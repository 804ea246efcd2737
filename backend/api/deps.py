"""
Shared dependencies for the EduVision API.

Provides:
- Structured logging
- Process-wide key pool, retry orchestrator and feature runner
  (created once, reused per request)
- Session store singleton
"""

import logging
from typing import Optional

from backend.features import FeatureRunner
from backend.llm_router import KeyPool, RetryOrchestrator
from backend.utils.session_store import SessionStore
from configs import LOG_LEVEL


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

def setup_logging() -> logging.Logger:
    """Configure structured logging for the API."""
    logger = logging.getLogger("eduvision")

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    return logger


logger = setup_logging()


# =============================================================================
# SINGLETONS
# =============================================================================

_key_pool: Optional[KeyPool] = None
_runner: Optional[FeatureRunner] = None
_session_store: Optional[SessionStore] = None


def get_key_pool() -> KeyPool:
    """The process-wide key pool; keys are read from API_KEY on first use."""
    global _key_pool
    if _key_pool is None:
        _key_pool = KeyPool.from_env()
    return _key_pool


def get_runner() -> FeatureRunner:
    """
    Get or create the singleton feature runner.

    All requests share one RetryOrchestrator so the rotation cursor is
    shared across concurrent requests.
    """
    global _runner
    if _runner is None:
        logger.info("Creating singleton FeatureRunner")
        _runner = FeatureRunner(RetryOrchestrator(get_key_pool()))
    return _runner


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def reset_dependencies() -> None:
    """Drop all singletons (useful for testing)."""
    global _key_pool, _runner, _session_store
    _key_pool = None
    _runner = None
    _session_store = None
