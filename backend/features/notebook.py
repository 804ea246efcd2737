"""Notebook page / PDF digitization with concept map and flashcards."""

from backend.llm_router import GenerationRequest, InlineDataPart, TextPart
from backend.llm_router.response_schema import BOOLEAN, STRING, array_of, object_of
from backend.models import NotebookAnalysis
from configs import get_feature_prompt

from .base import FeatureRunner

NOTEBOOK_SCHEMA = object_of(
    transcription=STRING,
    summary=STRING,
    keyConcepts=array_of(object_of(name=STRING, definition=STRING, category=STRING)),
    connections=array_of(object_of(source=STRING, target=STRING, relationship=STRING)),
    actionPlan=array_of(STRING),
    flashcards=array_of(object_of(front=STRING, back=STRING, mastered=BOOLEAN)),
)


async def analyze_notebook(
    runner: FeatureRunner, base64_data: str, mime_type: str = "image/jpeg"
) -> NotebookAnalysis:
    request = GenerationRequest.single_turn(
        [InlineDataPart(mime_type=mime_type, data=base64_data), TextPart(get_feature_prompt("notebook"))],
        response_schema=NOTEBOOK_SCHEMA,
    )
    return await runner.generate_structured(request, NotebookAnalysis, empty_message="No response")
