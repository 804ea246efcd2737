"""Quiz battle question generation."""

from typing import Dict, List

from backend.llm_router import GenerationRequest, ResponseParseError, TextPart
from backend.llm_router.response_schema import STRING, array_of, object_of
from backend.models import QuizQuestion
from configs import get_feature_prompt

from .base import FeatureRunner

QUIZ_SCHEMA = object_of(
    question=STRING,
    options=array_of(STRING),
    correctAnswer=STRING,
    explanation=STRING,
)

SYLLABUS: Dict[str, List[str]] = {
    "Grade 9": [
        "Number Systems", "Polynomials", "Coordinate Geometry", "Linear Equations",
        "Lines and Angles", "Triangles", "Circles", "Surface Areas and Volumes",
        "Statistics", "Probability", "Full Portion",
    ],
    "Grade 10": [
        "Real Numbers", "Polynomials", "Quadratic Equations", "Arithmetic Progressions",
        "Triangles", "Coordinate Geometry", "Trigonometry", "Circles",
        "Areas Related to Circles", "Surface Areas and Volumes", "Statistics",
        "Probability", "Full Portion",
    ],
    "Grade 11": [
        "Sets", "Relations and Functions", "Trigonometric Functions", "Complex Numbers",
        "Linear Inequalities", "Permutations and Combinations", "Binomial Theorem",
        "Sequences and Series", "Straight Lines", "Conic Sections",
        "Limits and Derivatives", "Statistics", "Probability", "Full Portion",
    ],
    "Grade 12": [
        "Relations and Functions", "Inverse Trigonometric Functions", "Matrices",
        "Determinants", "Continuity and Differentiability", "Application of Derivatives",
        "Integrals", "Application of Integrals", "Differential Equations",
        "Vector Algebra", "Three Dimensional Geometry", "Linear Programming",
        "Probability", "Full Portion",
    ],
    "College": [
        "Calculus I", "Calculus II", "Linear Algebra", "Differential Equations",
        "Discrete Math", "Statistics & Probability", "Full Portion",
    ],
}

DEFAULT_GRADE = "Grade 10"


async def generate_quiz_question(runner: FeatureRunner, topic: str, grade: str = DEFAULT_GRADE) -> QuizQuestion:
    request = GenerationRequest.single_turn(
        [TextPart(get_feature_prompt("quiz", grade=grade, topic=topic))],
        response_schema=QUIZ_SCHEMA,
    )
    question = await runner.generate_structured(request, QuizQuestion, empty_message="Quiz gen failed")
    if question.correct_answer not in question.options:
        raise ResponseParseError("Quiz answer does not match any option")
    return question
