"""
Multi-turn solver chat.

The full transcript is replayed on every call; attachments (photos of
problems, voice notes) ride along with the turn they belong to.
"""

from typing import List, Optional

from backend.llm_router import Content, GenerationRequest, InlineDataPart, TextPart
from backend.models import ChatMessage
from configs import get_feature_prompt

from .base import FeatureRunner

FALLBACK_REPLY = "I couldn't generate a response."


def message_to_content(message: ChatMessage, role: Optional[str] = None) -> Content:
    parts = [TextPart(message.text)]
    parts.extend(InlineDataPart(mime_type=a.mime_type, data=a.data) for a in message.attachments)
    return Content(role=role or message.role, parts=parts)


def build_contents(history: List[ChatMessage], new_message: ChatMessage) -> List[Content]:
    contents = [message_to_content(m) for m in history]
    contents.append(message_to_content(new_message, role="user"))
    return contents


async def send_solver_message(
    runner: FeatureRunner, history: List[ChatMessage], new_message: ChatMessage
) -> str:
    request = GenerationRequest(
        contents=build_contents(history, new_message),
        system_instruction=get_feature_prompt("solver"),
    )
    result = await runner.generate(request)
    return result.text or FALLBACK_REPLY
