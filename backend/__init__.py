"""
EduVision Backend Package

This package contains the Gemini-backed study tools:
- llm_router: Key pool, rotation/retry orchestrator, Gemini client
- features: Exam, camera, professor, worksheet, solver, notebook, quiz
- models: Structured result models
- utils: JSON extraction and session history storage
- db_connection: Quiz scores and XP profiles (SQLite or PostgreSQL)
"""

from backend.llm_router import (
    KeyPool,
    RetryOrchestrator,
    GeminiClient,
    FailureKind,
    LLMError,
)
from backend.features import FeatureRunner

__all__ = [
    "KeyPool",
    "RetryOrchestrator",
    "GeminiClient",
    "FailureKind",
    "LLMError",
    "FeatureRunner",
]
