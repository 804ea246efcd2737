"""
Gemini client bound to a single API key.

PURPOSE:
========
This is the network-call boundary. One GeminiClient is created per
attempt with the key the retry orchestrator issued, sends one request
through LiteLLM, and converts any provider failure into the typed
LLMError hierarchy (classifying it once, here).

USAGE:
======
    async def operation(api_key):
        client = GeminiClient(api_key)
        result = await client.generate(GenerationRequest.single_turn([TextPart("hi")]))
        return result.text

    text = await orchestrator.execute_with_retry(operation)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import litellm

from configs import GEMINI_MODEL

from .errors import to_llm_error

logger = logging.getLogger("eduvision.gemini")


# ============================================================
# REQUEST / RESPONSE MODELS
# ============================================================

@dataclass
class TextPart:
    """Plain text content."""
    text: str


@dataclass
class InlineDataPart:
    """Inline binary payload (base64) tagged with its MIME type."""
    mime_type: str
    data: str


Part = Union[TextPart, InlineDataPart]


@dataclass
class Content:
    """One conversation turn."""
    role: str  # "user" or "model"
    parts: List[Part]


@dataclass
class GenerationRequest:
    """Everything needed for one generate call."""
    contents: List[Content]
    system_instruction: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    use_search_grounding: bool = False
    model: str = GEMINI_MODEL

    @classmethod
    def single_turn(cls, parts: List[Part], **kwargs) -> "GenerationRequest":
        return cls(contents=[Content(role="user", parts=parts)], **kwargs)


@dataclass
class GroundingSource:
    uri: Optional[str] = None
    title: Optional[str] = None


@dataclass
class GenerationResult:
    """Standardized Gemini response."""
    text: str
    model: str
    sources: List[GroundingSource] = field(default_factory=list)
    web_search_queries: List[str] = field(default_factory=list)
    tokens_used: int = 0


# ============================================================
# MESSAGE BUILDING
# ============================================================

def _part_to_message_content(part: Part) -> Dict[str, Any]:
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{part.mime_type};base64,{part.data}"},
    }


def build_messages(request: GenerationRequest) -> List[Dict[str, Any]]:
    """Translate a GenerationRequest into chat-completion messages."""
    messages: List[Dict[str, Any]] = []
    if request.system_instruction:
        messages.append({"role": "system", "content": request.system_instruction})

    for content in request.contents:
        role = "assistant" if content.role == "model" else "user"
        messages.append({
            "role": role,
            "content": [_part_to_message_content(p) for p in content.parts],
        })
    return messages


def build_completion_kwargs(request: GenerationRequest, api_key: Optional[str]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "model": request.model,
        "messages": build_messages(request),
    }
    if api_key:
        kwargs["api_key"] = api_key
    if request.response_schema is not None:
        kwargs["response_format"] = {
            "type": "json_object",
            "response_schema": request.response_schema,
        }
    if request.use_search_grounding:
        kwargs["tools"] = [{"googleSearch": {}}]
    return kwargs


def _grounding_metadata(response: Any) -> List[Dict[str, Any]]:
    metadata = getattr(response, "vertex_ai_grounding_metadata", None)
    if metadata is None:
        hidden = getattr(response, "_hidden_params", None) or {}
        metadata = hidden.get("vertex_ai_grounding_metadata")
    if isinstance(metadata, dict):
        return [metadata]
    return list(metadata or [])


def extract_grounding(response: Any):
    """Collect citation sources and search queries from a grounded response."""
    sources: List[GroundingSource] = []
    queries: List[str] = []
    for entry in _grounding_metadata(response):
        for chunk in entry.get("groundingChunks", []) or []:
            web = chunk.get("web") or {}
            if web:
                sources.append(GroundingSource(uri=web.get("uri"), title=web.get("title")))
        queries.extend(entry.get("webSearchQueries", []) or [])
    return sources, queries


# ============================================================
# CLIENT
# ============================================================

class GeminiClient:
    """
    Gemini provider bound to one key.

    Raises:
        RateLimitError / QuotaExceededError: service rejected on quota grounds
        LLMError: any other failure
    """

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        kwargs = build_completion_kwargs(request, self.api_key)
        logger.debug("Calling Gemini (%s)", request.model)

        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            error = to_llm_error(e)
            logger.debug("Gemini call failed (%s): %s", error.failure_kind.value, e)
            raise error from e

        try:
            text = response.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            raise to_llm_error(e) from e

        sources, queries = extract_grounding(response)
        usage = getattr(response, "usage", None)
        return GenerationResult(
            text=text,
            model=request.model,
            sources=sources,
            web_search_queries=queries,
            tokens_used=getattr(usage, "total_tokens", 0) or 0,
        )
