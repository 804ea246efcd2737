"""
Tolerant JSON parsing for structured Gemini responses.

With a response schema Gemini normally returns bare JSON, but truncated
or decorated output still shows up occasionally:

    ```json
    {"title": "Quadratics"}
    ```

or commentary around the object. The parser tries a strict load first,
then strips markdown fences, then falls back to the first balanced
``{...}`` block.
"""
import json
import re
from typing import Any, Dict, Optional

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


class JSONExtractionError(Exception):
    """Raised when no valid JSON object can be extracted."""
    pass


def _strip_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text


def find_first_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced JSON object in ``text``, or None.

    Braces inside string literals are ignored.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of a model response.

    Raises:
        JSONExtractionError: if the text holds no parseable JSON object
    """
    if not text or not isinstance(text, str):
        raise JSONExtractionError("Input text is empty or not a string")

    text = text.strip()
    for candidate in (text, _strip_fences(text)):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
        raise JSONExtractionError(f"Expected JSON object, got {type(parsed).__name__}")

    block = find_first_json_object(text)
    if block is None:
        raise JSONExtractionError("No JSON object found (unbalanced or missing braces)")
    try:
        return json.loads(block)
    except json.JSONDecodeError as e:
        raise JSONExtractionError(f"Extracted text is not valid JSON: {e}\nExtracted: {block[:200]}")
