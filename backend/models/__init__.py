"""Feature result models."""
from .schemas import (
    CamelModel,
    Difficulty,
    ProfessorLevel,
    CameraMode,
    ChapterMarks,
    TopicFrequency,
    DifficultyShare,
    ExamAnalysis,
    CameraAnalysisResult,
    GroundingSourceModel,
    GroundingMetadata,
    ProfessorResponse,
    Question,
    Worksheet,
    ChatAttachment,
    ChatMessage,
    KeyConcept,
    ConceptConnection,
    Flashcard,
    NotebookAnalysis,
    QuizQuestion,
    HistoryType,
    HistoryItem,
)

__all__ = [
    "CamelModel",
    "Difficulty",
    "ProfessorLevel",
    "CameraMode",
    "ChapterMarks",
    "TopicFrequency",
    "DifficultyShare",
    "ExamAnalysis",
    "CameraAnalysisResult",
    "GroundingSourceModel",
    "GroundingMetadata",
    "ProfessorResponse",
    "Question",
    "Worksheet",
    "ChatAttachment",
    "ChatMessage",
    "KeyConcept",
    "ConceptConnection",
    "Flashcard",
    "NotebookAnalysis",
    "QuizQuestion",
    "HistoryType",
    "HistoryItem",
]
