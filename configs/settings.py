"""
Configuration management for the EduVision backend.

This module handles all configuration loading and validation.
Values come from the environment (or a local .env file) and are
exposed as module-level constants so every layer reads the same
settings.
"""
import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
# interpolate=False prevents $VAR expansion in values (API keys may contain $)
load_dotenv(interpolate=False)


# =============================================================================
# CONFIGURATION VALIDATION
# =============================================================================

class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_int_env(key: str, default: int) -> int:
    """Read an integer environment variable or raise ConfigurationError."""
    raw = os.getenv(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"❌ {key} must be an integer, got: {raw!r}")


def _get_float_env(key: str, default: float) -> float:
    """Read a float environment variable or raise ConfigurationError."""
    raw = os.getenv(key, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"❌ {key} must be a number, got: {raw!r}")


def get_api_key_config() -> str:
    """
    Return the raw comma-separated Gemini key list.

    Read at call time (not import time) so the key pool can be
    configured lazily on first use.
    """
    return os.getenv("API_KEY") or os.getenv("GEMINI_API_KEYS") or ""


def validate_configuration(require_keys: bool = False) -> dict:
    """
    Validate all configuration and return validated config dict.

    Args:
        require_keys: If True, an empty key pool is reported as an error.
            The application itself runs without keys (calls go out
            unauthenticated and fail naturally), so this is off by default.

    Returns:
        Dictionary with validated configuration values

    Raises:
        ConfigurationError: If any setting is invalid
    """
    errors = []
    config = {}

    keys = [k for k in (p.strip() for p in get_api_key_config().split(",")) if k]
    config["key_count"] = len(keys)
    if require_keys and not keys:
        errors.append(
            "❌ No Gemini API keys configured!\n"
            "   Add a comma-separated list to your .env file: API_KEY=key1,key2"
        )

    if MAX_KEY_ATTEMPTS < 1:
        errors.append(f"MAX_KEY_ATTEMPTS must be >= 1, got: {MAX_KEY_ATTEMPTS}")
    if BACKOFF_BASE_SECONDS < 0 or BACKOFF_JITTER_SECONDS < 0:
        errors.append("Backoff settings must not be negative")
    if ATTEMPT_TIMEOUT_SECONDS < 0:
        errors.append(f"ATTEMPT_TIMEOUT_SECONDS must be >= 0, got: {ATTEMPT_TIMEOUT_SECONDS}")

    config["model"] = GEMINI_MODEL
    from backend.db_connection import get_db_type  # deferred, backend imports configs
    config["database_type"] = get_db_type()

    if errors:
        error_msg = "\n\nConfiguration Errors:\n" + "\n".join(f"  • {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return config


# =============================================================================
# BASE PATHS
# =============================================================================

BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"

# =============================================================================
# LLM CONFIGURATION
# =============================================================================

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini/gemini-2.5-flash")

# Key rotation: attempts per logical call are min(pool size, this ceiling)
MAX_KEY_ATTEMPTS = _get_int_env("MAX_KEY_ATTEMPTS", 5)

# Randomized backoff after a rate-limited attempt: base + U(0, jitter)
BACKOFF_BASE_SECONDS = _get_float_env("BACKOFF_BASE_SECONDS", 0.2)
BACKOFF_JITTER_SECONDS = _get_float_env("BACKOFF_JITTER_SECONDS", 0.3)

# Per-attempt deadline in seconds; 0 waits indefinitely
ATTEMPT_TIMEOUT_SECONDS = _get_float_env("ATTEMPT_TIMEOUT_SECONDS", 0)

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

# PostgreSQL comes from DATABASE_URL, read per connection in backend.db_connection

# SQLite database path (for local development)
DATABASE_PATH = os.getenv("DATABASE_PATH", str(DATA_DIR / "eduvision.db"))

# Session history store; in-memory when unset
REDIS_URL = os.getenv("REDIS_URL", "").strip()


# =============================================================================
# SYSTEM SETTINGS
# =============================================================================

VERBOSE = os.getenv("VERBOSE", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ALLOWED_ORIGINS: List[str] = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Quiz battle rules
QUIZ_START_HEALTH = 3
QUIZ_SECONDS_PER_QUESTION = 30
QUIZ_BASE_POINTS = 100
QUIZ_STREAK_BONUS = 10

LEADERBOARD_LIMIT = 20


# =============================================================================
# FEATURE PROMPTS
# =============================================================================

FEATURE_PROMPTS = {
    "exam": """
      Analyze this exam paper.
      1. Extract the questions and provide detailed step-by-step solutions using LaTeX for math.
      2. Analyze the marks distribution by chapter.
      3. Analyze the difficulty level.
      4. Identify weak areas and suggest a revision plan.
      Return the response in JSON format matching the schema.
    """,

    "camera_solver": (
        "Act as an expert professor. Solve the math problem. Provide a rigorous, "
        "step-by-step derivation using LaTeX for math. State known values and formulas. "
        "Return valid JSON."
    ),

    "camera_teacher": (
        "Act as a formal academic tutor. Analyze the math problem. Do NOT provide the full "
        "solution immediately. Instead: 1. Identify the core concept. 2. Provide a high-level "
        "hint. 3. Check for errors. Be concise. Return valid JSON."
    ),

    "professor": """You are an AI Professor.
    1. **Strict Formal Tone**: Start DIRECTLY with the academic content.
    2. **Format**: Use Markdown. Use **bold** for terms.
    3. **Math**: ALWAYS use LaTeX for math expressions (e.g. $E=mc^2$).
    4. **Structure**: Definition -> Explanation -> Example.
    """,

    "worksheet": """Generate a math worksheet with {count} questions on "{topic}" ({difficulty}).

    Return valid JSON:
    {{
      "title": "Worksheet Title",
      "questions": [
        {{
          "id": 1,
          "question": "The question text. Use LaTeX for math (e.g. $x^2$).",
          "answer": "Final answer.",
          "explanation": "Concise step-by-step derivation. Keep it brief to ensure valid JSON.",
          "difficulty": "{difficulty}",
          "topic": "{topic}"
        }}
      ]
    }}""",

    "solver": """
      You are an **Advanced AI Math Tutor & Solver** designed for CBSE/SAT students.

      ### 1. INPUT PROCESSING RULE (OCR & CLEANING)
      - If the user provides an image or messy text, FIRST clean it.
      - Fix formatting issues and OCR mistakes.
      - Rewrite the final clear version of the question.
      - Identify the specific Chapter/Topic (e.g., Trigonometry, Quadratic Equations).

      ### 2. MODE DETECTION
      - **HINT MODE**: If user says "hint", "help", "guide", "clue" -> Provide ONLY a small pedagogical hint. Do NOT solve it.
      - **WORKSHEET MODE**: If user says "generate worksheet", "practice questions", "give me problems" -> Generate 10 mixed-difficulty questions on the current topic.
      - **SOLVER MODE** (Default): Provide the full solution.

      ### 3. RESPONSE FORMAT
      **For Solver Mode:**
      1.  **Cleaned Question:** [The clear version of the input]
      2.  **Topic Identified:** [e.g. Polynomials - Class 10]
      3.  **Step-by-Step Solution:** Formula, Substitution, Calculation, Final Answer.
      4.  **Verification:** explicit double-check.

      **For Hint Mode:**
      1.  **Topic Identified:** ...
      2.  **Pedagogical Hint:** [A nudge in the right direction]

      **For Worksheet Mode:**
      1.  **Practice Worksheet:** List 10 questions (Easy/Medium/Hard).
      2.  **Answers:** Hidden or at the bottom.

      ### 4. RULES
      - Use **LaTeX** for all math (e.g., $x^2 + 2x + 1 = 0$).
      - Keep explanations aligned with standard school curriculum (CBSE/Common Core).
      - No college-level methods unless explicitly asked.
      - If image is unclear, ask for a rescan.
    """,

    "notebook": """
      Analyze this notebook page or PDF document.
      1. Transcribe into Markdown. Use LaTeX for math.
      2. Extract key concepts and connections.
      3. Create an action plan and flashcards.
    """,

    "quiz": """Generate 1 multiple-choice question for {grade} level students on the topic "{topic}".

    Output strictly valid JSON with this structure:
    {{
      "question": "The actual question text here. Use LaTeX for math. Do NOT include any instructions, meta-commentary, or descriptions of the format.",
      "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
      "correctAnswer": "The exact string content of the correct option",
      "explanation": "Brief explanation of why it is correct"
    }}

    IMPORTANT:
    1. The "question" field must contain ONLY the math problem/question.
    2. "correctAnswer" must match one of the strings in "options" exactly.
    """,
}

# Persona suffix appended to the professor system instruction, keyed by level value
PROFESSOR_PERSONAS = {
    "Elementary (Grade 1-5)": " Persona: Friendly Teacher (Grade 1-5). Simple analogies.",
    "Middle School (Grade 6-8)": " Persona: Middle School Tutor (Grade 6-8). Focus on logic.",
    "High School (Grade 9-12)": " Persona: High School/SAT Prep. Formal. Use LaTeX.",
    "College (Undergrad)": " Persona: University Professor. Rigorous proofs.",
    "PhD (Research/Expert)": " Persona: Research Scientist. Deep theory.",
}


def get_feature_prompt(name: str, **kwargs) -> str:
    """Look up a feature prompt and fill its placeholders."""
    template: Optional[str] = FEATURE_PROMPTS.get(name)
    if template is None:
        raise ConfigurationError(f"❌ Unknown feature prompt: {name}")
    return template.format(**kwargs) if kwargs else template
