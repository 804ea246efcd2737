"""
Error types and failure classification for Gemini calls.

Classification happens exactly once, at the network-call boundary
(GeminiClient). Everything downstream, the retry loop included, reads
the typed ``failure_kind`` attribute instead of inspecting error text.
"""

from enum import Enum
from typing import Optional

from litellm.exceptions import RateLimitError as LiteLLMRateLimitError


class FailureKind(str, Enum):
    """Outcome class of a failed attempt."""
    RATE_LIMITED = "rate_limited"   # quota/throughput; another key may succeed
    OTHER = "other"                 # terminal for this logical call


class LLMError(Exception):
    """Base exception for LLM errors."""
    failure_kind = FailureKind.OTHER

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(LLMError):
    """Raised when rate limit is exceeded."""
    failure_kind = FailureKind.RATE_LIMITED


class QuotaExceededError(RateLimitError):
    """Raised when quota is exhausted."""
    pass


class EmptyResponseError(LLMError):
    """Raised when the model returns no text."""
    pass


class ResponseParseError(LLMError):
    """Raised when a structured response cannot be parsed or validated."""
    pass


# Lower-cased message fragments that mark a quota/throughput rejection
RATE_LIMIT_MARKERS = (
    "429",
    "resource has been exhausted",
    "resource_exhausted",
    "rate limit",
)
QUOTA_MARKERS = (
    "quota exceeded",
    "exceeded your current quota",
)


def classify_exception(exc: BaseException) -> FailureKind:
    """
    Classify a raw provider exception.

    RATE_LIMITED when the service rejected the request for quota or
    throughput reasons (HTTP 429 or an equivalent message). Everything
    else, including auth failures, bad input and network errors, is OTHER.
    """
    if isinstance(exc, LLMError):
        return exc.failure_kind
    if isinstance(exc, LiteLLMRateLimitError):
        return FailureKind.RATE_LIMITED
    if getattr(exc, "status_code", None) == 429 or getattr(exc, "status", None) == 429:
        return FailureKind.RATE_LIMITED

    message = str(exc).lower()
    if any(marker in message for marker in RATE_LIMIT_MARKERS + QUOTA_MARKERS):
        return FailureKind.RATE_LIMITED
    return FailureKind.OTHER


def to_llm_error(exc: BaseException) -> LLMError:
    """
    Convert a raw provider exception into the typed hierarchy.

    The original exception is chained by the caller (``raise ... from exc``)
    so it stays inspectable as ``__cause__``.
    """
    if isinstance(exc, LLMError):
        return exc

    status_code = getattr(exc, "status_code", None)
    message = f"Gemini API error: {exc}"

    if classify_exception(exc) is FailureKind.RATE_LIMITED:
        lowered = str(exc).lower()
        if any(marker in lowered for marker in QUOTA_MARKERS):
            return QuotaExceededError(message, status_code=status_code or 429)
        return RateLimitError(message, status_code=status_code or 429)
    return LLMError(message, status_code=status_code)


def failure_kind_of(exc: BaseException) -> FailureKind:
    """Read the typed classification of an attempt failure."""
    kind = getattr(exc, "failure_kind", None)
    return kind if isinstance(kind, FailureKind) else FailureKind.OTHER
