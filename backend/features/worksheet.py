"""Practice worksheet generation."""

from backend.llm_router import GenerationRequest, TextPart
from backend.llm_router.response_schema import INTEGER, STRING, array_of, object_of
from backend.models import Difficulty, Worksheet
from configs import get_feature_prompt

from .base import FeatureRunner

WORKSHEET_SCHEMA = object_of(
    title=STRING,
    questions=array_of(object_of(
        id=INTEGER,
        question=STRING,
        answer=STRING,
        explanation=STRING,
        difficulty=STRING,
        topic=STRING,
    )),
)

MIN_QUESTIONS = 1
MAX_QUESTIONS = 30


async def generate_worksheet(
    runner: FeatureRunner, topic: str, difficulty: Difficulty, count: int
) -> Worksheet:
    if not MIN_QUESTIONS <= count <= MAX_QUESTIONS:
        raise ValueError(f"count must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}, got {count}")

    prompt = get_feature_prompt(
        "worksheet", count=count, topic=topic, difficulty=Difficulty(difficulty).value
    )
    request = GenerationRequest.single_turn([TextPart(prompt)], response_schema=WORKSHEET_SCHEMA)
    return await runner.generate_structured(request, Worksheet, empty_message="Failed to generate worksheet")
