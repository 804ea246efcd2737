"""
Response-shape constraints for structured Gemini output.

A schema names the expected JSON fields and their primitive types.
Gemini accepts the OpenAPI subset produced here.
"""

from enum import Enum
from typing import Any, Dict, Optional


class SchemaType(str, Enum):
    """Primitive types understood by the response-schema constraint."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


def scalar(kind: SchemaType, description: Optional[str] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": kind.value}
    if description:
        schema["description"] = description
    return schema


def array_of(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": SchemaType.ARRAY.value, "items": items}


def object_of(**properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": SchemaType.OBJECT.value, "properties": properties}


STRING = scalar(SchemaType.STRING)
NUMBER = scalar(SchemaType.NUMBER)
INTEGER = scalar(SchemaType.INTEGER)
BOOLEAN = scalar(SchemaType.BOOLEAN)
