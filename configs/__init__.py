"""Config module initialization."""
from .settings import (
    # Core configuration
    get_api_key_config,
    get_feature_prompt,
    DATABASE_PATH,
    REDIS_URL,
    VERBOSE,
    LOG_LEVEL,
    ALLOWED_ORIGINS,
    FEATURE_PROMPTS,
    PROFESSOR_PERSONAS,
    # LLM configuration
    GEMINI_MODEL,
    MAX_KEY_ATTEMPTS,
    BACKOFF_BASE_SECONDS,
    BACKOFF_JITTER_SECONDS,
    ATTEMPT_TIMEOUT_SECONDS,
    # Quiz / leaderboard
    QUIZ_START_HEALTH,
    QUIZ_SECONDS_PER_QUESTION,
    QUIZ_BASE_POINTS,
    QUIZ_STREAK_BONUS,
    LEADERBOARD_LIMIT,
    # Validation
    ConfigurationError,
    validate_configuration,
)

__all__ = [
    "get_api_key_config",
    "get_feature_prompt",
    "DATABASE_PATH",
    "REDIS_URL",
    "VERBOSE",
    "LOG_LEVEL",
    "ALLOWED_ORIGINS",
    "FEATURE_PROMPTS",
    "PROFESSOR_PERSONAS",
    "GEMINI_MODEL",
    "MAX_KEY_ATTEMPTS",
    "BACKOFF_BASE_SECONDS",
    "BACKOFF_JITTER_SECONDS",
    "ATTEMPT_TIMEOUT_SECONDS",
    "QUIZ_START_HEALTH",
    "QUIZ_SECONDS_PER_QUESTION",
    "QUIZ_BASE_POINTS",
    "QUIZ_STREAK_BONUS",
    "LEADERBOARD_LIMIT",
    "ConfigurationError",
    "validate_configuration",
]
