"""
LLM Router module.

Handles Gemini key rotation, retry on rate limits and the typed
classification of provider failures.
"""

from .errors import (
    FailureKind,
    LLMError,
    RateLimitError,
    QuotaExceededError,
    EmptyResponseError,
    ResponseParseError,
    classify_exception,
    failure_kind_of,
)
from .key_pool import KeyPool, mask_key, parse_keys
from .retry import RetryOrchestrator
from .gemini_client import (
    GeminiClient,
    GenerationRequest,
    GenerationResult,
    GroundingSource,
    Content,
    TextPart,
    InlineDataPart,
)

__all__ = [
    "FailureKind",
    "LLMError",
    "RateLimitError",
    "QuotaExceededError",
    "EmptyResponseError",
    "ResponseParseError",
    "classify_exception",
    "failure_kind_of",
    "KeyPool",
    "mask_key",
    "parse_keys",
    "RetryOrchestrator",
    "GeminiClient",
    "GenerationRequest",
    "GenerationResult",
    "GroundingSource",
    "Content",
    "TextPart",
    "InlineDataPart",
]
