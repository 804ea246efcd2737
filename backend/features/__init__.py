"""
Feature call sites.

Each feature builds one Gemini request and runs it through the
FeatureRunner (key rotation + retry).
"""

from .base import FeatureRunner
from .exam import analyze_exam
from .camera import analyze_frame
from .professor import ask_professor
from .worksheet import generate_worksheet
from .solver_chat import send_solver_message
from .notebook import analyze_notebook
from .quiz import generate_quiz_question, SYLLABUS
from .quiz_battle import QuizBattle, GameState, AnswerOutcome

__all__ = [
    "FeatureRunner",
    "analyze_exam",
    "analyze_frame",
    "ask_professor",
    "generate_worksheet",
    "send_solver_message",
    "analyze_notebook",
    "generate_quiz_question",
    "SYLLABUS",
    "QuizBattle",
    "GameState",
    "AnswerOutcome",
]
