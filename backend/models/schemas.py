"""
Pydantic models for feature results.

Field names are snake_case in Python and camelCase on the wire (the
names the feature prompts and response schemas ask Gemini for).
Every field has a default because the model may omit any of them.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class Difficulty(str, Enum):
    """Worksheet difficulty."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    OLYMPIAD = "Olympiad/Competitive"


class ProfessorLevel(str, Enum):
    """Persona the AI professor adopts."""
    ELEMENTARY = "Elementary (Grade 1-5)"
    MIDDLE = "Middle School (Grade 6-8)"
    HIGH = "High School (Grade 9-12)"
    COLLEGE = "College (Undergrad)"
    PHD = "PhD (Research/Expert)"


class CameraMode(str, Enum):
    SOLVER = "solver"
    TEACHER = "teacher"


# ============================================================
# Exam Analysis
# ============================================================

class ChapterMarks(CamelModel):
    chapter: str = ""
    marks: float = 0


class TopicFrequency(CamelModel):
    topic: str = ""
    frequency: str = ""  # e.g. "High", "Low"


class DifficultyShare(CamelModel):
    level: str = ""
    percentage: float = 0


class ExamAnalysis(CamelModel):
    """Analysis of an uploaded exam paper."""
    marks_distribution: List[ChapterMarks] = Field(default_factory=list)
    topic_analysis: List[TopicFrequency] = Field(default_factory=list)
    difficulty_map: List[DifficultyShare] = Field(default_factory=list)
    weak_areas: List[str] = Field(default_factory=list)
    revision_plan: List[str] = Field(default_factory=list)
    solutions: str = Field(default="", description="Markdown content of solutions")


# ============================================================
# Camera
# ============================================================

class CameraAnalysisResult(CamelModel):
    solved_equation: Optional[str] = None
    steps: Optional[List[str]] = None
    hint: Optional[str] = None
    error_detected: Optional[str] = None
    raw_text_response: str = ""


# ============================================================
# Professor
# ============================================================

class GroundingSourceModel(CamelModel):
    uri: Optional[str] = None
    title: Optional[str] = None


class GroundingMetadata(CamelModel):
    sources: List[GroundingSourceModel] = Field(default_factory=list)
    web_search_queries: List[str] = Field(default_factory=list)


class ProfessorResponse(CamelModel):
    text: str
    grounding_metadata: Optional[GroundingMetadata] = None


# ============================================================
# Worksheet
# ============================================================

class Question(CamelModel):
    id: int = 0
    question: str = ""
    answer: str = ""
    explanation: str = ""
    difficulty: str = ""
    topic: str = ""


class Worksheet(CamelModel):
    title: str = ""
    questions: List[Question] = Field(default_factory=list)


# ============================================================
# Chat
# ============================================================

class ChatAttachment(CamelModel):
    type: str = Field(..., pattern="^(image|audio)$")
    data: str = Field(..., description="base64 payload")
    mime_type: str


class ChatMessage(CamelModel):
    id: str = ""
    role: str = Field(default="user", pattern="^(user|model)$")
    text: str = ""
    attachments: List[ChatAttachment] = Field(default_factory=list)
    timestamp: int = 0


# ============================================================
# Notebook
# ============================================================

class KeyConcept(CamelModel):
    name: str = ""
    definition: str = ""
    category: str = ""


class ConceptConnection(CamelModel):
    source: str = ""
    target: str = ""
    relationship: str = ""


class Flashcard(CamelModel):
    front: str = ""
    back: str = ""
    mastered: bool = False


class NotebookAnalysis(CamelModel):
    transcription: str = ""
    summary: str = ""
    key_concepts: List[KeyConcept] = Field(default_factory=list)
    connections: List[ConceptConnection] = Field(default_factory=list)
    action_plan: List[str] = Field(default_factory=list)
    flashcards: List[Flashcard] = Field(default_factory=list)


# ============================================================
# Quiz
# ============================================================

class QuizQuestion(CamelModel):
    question: str = ""
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: str = ""


# ============================================================
# Session history
# ============================================================

class HistoryType(str, Enum):
    EXAM = "exam"
    NOTEBOOK = "notebook"
    PROF = "prof"
    SOLVER = "solver"
    SHEET = "sheet"


class HistoryItem(CamelModel):
    id: str
    title: str
    timestamp: int
    type: HistoryType
