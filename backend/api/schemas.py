"""
Pydantic schemas for the EduVision API.

These models define the request/response structure for all API endpoints.
Feature results reuse the models in backend.models directly.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from backend.models import (
    CameraMode,
    ChatMessage,
    Difficulty,
    HistoryItem,
    HistoryType,
    ProfessorLevel,
)


# ============================================================
# FEATURE REQUESTS
# ============================================================

class FeatureRequest(BaseModel):
    """Base for feature calls; with both ids set the result is kept in session history."""
    user_id: Optional[str] = Field(None, description="Owner of the session (guest when anonymous)")
    session_id: Optional[str] = Field(None, description="Session to store the result under")


class ExamAnalyzeRequest(FeatureRequest):
    data: str = Field(..., min_length=1, description="Base64-encoded exam file")
    mime_type: str = Field("application/pdf", description="MIME type of the file")


class FrameAnalyzeRequest(FeatureRequest):
    data: str = Field(..., min_length=1, description="Base64-encoded JPEG frame")
    mode: CameraMode = CameraMode.SOLVER


class ProfessorRequest(FeatureRequest):
    query: str = Field("", max_length=4000)
    level: ProfessorLevel = ProfessorLevel.HIGH
    audio_data: Optional[str] = Field(None, description="Base64-encoded webm recording")

    @model_validator(mode="after")
    def _needs_query_or_audio(self):
        if not self.query and not self.audio_data:
            raise ValueError("Either query or audio_data is required")
        return self


class WorksheetRequest(FeatureRequest):
    topic: str = Field(..., min_length=1, max_length=200)
    difficulty: Difficulty = Difficulty.MEDIUM
    count: int = Field(5, ge=1, le=30)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"topic": "Quadratic Equations", "difficulty": "Medium", "count": 5}
            ]
        }
    }


class SolverMessageRequest(FeatureRequest):
    history: List[ChatMessage] = Field(default_factory=list)
    message: ChatMessage


class SolverMessageResponse(BaseModel):
    text: str


class NotebookAnalyzeRequest(FeatureRequest):
    data: str = Field(..., min_length=1, description="Base64-encoded page image or PDF")
    mime_type: str = "image/jpeg"


class QuizQuestionRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=200)
    grade: str = "Grade 10"


# ============================================================
# LEADERBOARD
# ============================================================

class ScoreRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=64)
    score: int = Field(..., ge=0)
    game_mode: str = "quiz"


class LeaderboardEntry(BaseModel):
    username: str
    score: int
    game_mode: str
    created_at: str


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntry]


class XPRequest(BaseModel):
    xp: int = Field(..., ge=0)
    username: Optional[str] = None


class XPResponse(BaseModel):
    user_id: str
    total_xp: int


# ============================================================
# HISTORY
# ============================================================

class HistoryUpsertRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    type: HistoryType


class HistoryResponse(BaseModel):
    items: List[HistoryItem]


# ============================================================
# SYSTEM
# ============================================================

class HealthResponse(BaseModel):
    """Response for GET /health."""
    status: str
    version: str
    model: str
    key_count: int = Field(..., description="Number of configured Gemini keys")
    keys: List[str] = Field(default_factory=list, description="Masked keys")
    database_connected: bool = False
    db_type: Optional[str] = None
