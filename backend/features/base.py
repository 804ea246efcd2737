"""
Shared plumbing for feature call sites.

Every feature builds one GenerationRequest and hands it to a
FeatureRunner. The runner wraps the request in an operation closure
(bind a client to the issued key, call, parse) and runs it through the
RetryOrchestrator, so every feature gets key rotation for free.
"""

import logging
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from backend.llm_router import (
    EmptyResponseError,
    GeminiClient,
    GenerationRequest,
    GenerationResult,
    ResponseParseError,
    RetryOrchestrator,
)
from backend.utils.json_utils import JSONExtractionError, parse_json_object

logger = logging.getLogger("eduvision.features")

M = TypeVar("M", bound=BaseModel)

ClientFactory = Callable[[Optional[str]], GeminiClient]


class FeatureRunner:
    """Runs feature requests through the retry orchestrator."""

    def __init__(self, orchestrator: RetryOrchestrator, client_factory: ClientFactory = GeminiClient):
        self.orchestrator = orchestrator
        self.client_factory = client_factory

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Return the raw result of the first successful attempt."""
        async def operation(api_key: Optional[str]) -> GenerationResult:
            client = self.client_factory(api_key)
            return await client.generate(request)

        return await self.orchestrator.execute_with_retry(operation)

    async def generate_structured(
        self,
        request: GenerationRequest,
        model: Type[M],
        empty_message: str = "No response from AI",
    ) -> M:
        """
        Generate JSON constrained by ``request.response_schema`` and validate it.

        Parsing happens inside the attempt, so a malformed body fails that
        attempt as a terminal (non rate-limit) error.
        """
        async def operation(api_key: Optional[str]) -> M:
            client = self.client_factory(api_key)
            result = await client.generate(request)
            if not result.text:
                raise EmptyResponseError(empty_message)
            try:
                return model.model_validate(parse_json_object(result.text))
            except (JSONExtractionError, ValidationError) as e:
                logger.warning("Could not parse %s response: %s", model.__name__, e)
                raise ResponseParseError(f"Malformed {model.__name__} response: {e}") from e

        return await self.orchestrator.execute_with_retry(operation)
