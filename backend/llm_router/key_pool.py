"""
Round-robin Gemini API key pool.

The pool is parsed from a single comma-separated value and changes only
through ``configure``; between reconfigurations only the cursor moves.
The cursor advances on every issuance, whatever the outcome of the call
that uses the key.
``next_key`` has no await in it, so concurrent coroutines on one event
loop always receive distinct, strictly increasing cursor positions.
"""

import logging
from typing import List, Optional

from configs import get_api_key_config

logger = logging.getLogger("eduvision.keys")

MASK_PREFIX = 8
MASK_SUFFIX = 4
MASK_SEPARATOR = "..."
# Keys this short or shorter are never partially shown
MASK_MIN_LENGTH = 16


def parse_keys(raw: Optional[str]) -> List[str]:
    """Split on commas, trim each part, drop empties."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def mask_key(key: str) -> str:
    """
    Mask a key for diagnostics: first 8 and last 4 characters.

    Keys of 16 characters or fewer are masked entirely.
    """
    if len(key) <= MASK_MIN_LENGTH:
        return "***"
    return f"{key[:MASK_PREFIX]}{MASK_SEPARATOR}{key[-MASK_SUFFIX:]}"


class KeyPool:
    """Ordered credential pool with a rotation cursor."""

    def __init__(self, raw: Optional[str] = None):
        self._keys: List[str] = []
        self._cursor = 0
        self._configured = False
        if raw is not None:
            self.configure(raw)

    @classmethod
    def from_env(cls) -> "KeyPool":
        """Create a pool that reads API_KEY lazily on first issuance."""
        return cls()

    def configure(self, raw: Optional[str]) -> None:
        """Replace the pool with the keys in ``raw`` and reset the cursor."""
        self._keys = parse_keys(raw)
        self._cursor = 0
        self._configured = True
        logger.info("Loaded %d Gemini API key(s)", len(self._keys))

    def _ensure_configured(self) -> None:
        if not self._configured:
            self.configure(get_api_key_config())

    @property
    def size(self) -> int:
        self._ensure_configured()
        return len(self._keys)

    def __len__(self) -> int:
        return self.size

    def next_key(self) -> Optional[str]:
        """
        Issue the key at the cursor and advance it.

        Returns None when the pool is empty; callers proceed without a key
        and let the service reject the request.
        """
        self._ensure_configured()
        if not self._keys:
            logger.error("No Gemini API keys configured (API_KEY is empty)")
            return None

        index = self._cursor
        key = self._keys[index]
        self._cursor = (index + 1) % len(self._keys)
        logger.info("Issued key #%d/%d: %s", index + 1, len(self._keys), mask_key(key))
        return key

    def masked_keys(self) -> List[str]:
        self._ensure_configured()
        return [mask_key(k) for k in self._keys]
