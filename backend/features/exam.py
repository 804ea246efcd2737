"""Exam paper analysis."""

from backend.llm_router import GenerationRequest, InlineDataPart, TextPart
from backend.llm_router.response_schema import (
    NUMBER, STRING, SchemaType, array_of, object_of, scalar,
)
from backend.models import ExamAnalysis
from configs import get_feature_prompt

from .base import FeatureRunner

EXAM_SCHEMA = object_of(
    marksDistribution=array_of(object_of(chapter=STRING, marks=NUMBER)),
    topicAnalysis=array_of(object_of(topic=STRING, frequency=STRING)),
    difficultyMap=array_of(object_of(level=STRING, percentage=NUMBER)),
    weakAreas=array_of(STRING),
    revisionPlan=array_of(STRING),
    solutions=scalar(SchemaType.STRING, "Markdown content of solutions"),
)


async def analyze_exam(
    runner: FeatureRunner, base64_data: str, mime_type: str = "application/pdf"
) -> ExamAnalysis:
    request = GenerationRequest.single_turn(
        [InlineDataPart(mime_type=mime_type, data=base64_data), TextPart(get_feature_prompt("exam"))],
        response_schema=EXAM_SCHEMA,
    )
    return await runner.generate_structured(request, ExamAnalysis)
