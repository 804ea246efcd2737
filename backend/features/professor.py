"""
AI professor chat.

Answers in the persona of the selected level and grounds answers with
Google Search; citation sources come back with the text.
"""

from typing import List, Optional

from backend.llm_router import GenerationRequest, InlineDataPart, TextPart
from backend.llm_router.gemini_client import Part
from backend.models import GroundingMetadata, GroundingSourceModel, ProfessorLevel, ProfessorResponse
from configs import PROFESSOR_PERSONAS, get_feature_prompt

from .base import FeatureRunner

FALLBACK_REPLY = "I couldn't understand that."
AUDIO_ONLY_PROMPT = "Listen to the audio and respond."


def build_system_instruction(level: ProfessorLevel) -> str:
    return get_feature_prompt("professor") + PROFESSOR_PERSONAS.get(ProfessorLevel(level).value, "")


def build_parts(query: str, audio_data: Optional[str] = None) -> List[Part]:
    # With audio the spoken question replaces the typed one
    if audio_data:
        parts: List[Part] = [InlineDataPart(mime_type="audio/webm", data=audio_data)]
        if not query:
            parts.append(TextPart(AUDIO_ONLY_PROMPT))
        return parts
    return [TextPart(query)]


async def ask_professor(
    runner: FeatureRunner,
    query: str,
    level: ProfessorLevel,
    audio_data: Optional[str] = None,
) -> ProfessorResponse:
    request = GenerationRequest.single_turn(
        build_parts(query, audio_data),
        system_instruction=build_system_instruction(level),
        use_search_grounding=True,
    )
    result = await runner.generate(request)

    grounding = None
    if result.sources or result.web_search_queries:
        grounding = GroundingMetadata(
            sources=[GroundingSourceModel(uri=s.uri, title=s.title) for s in result.sources],
            web_search_queries=result.web_search_queries,
        )
    return ProfessorResponse(text=result.text or FALLBACK_REPLY, grounding_metadata=grounding)
