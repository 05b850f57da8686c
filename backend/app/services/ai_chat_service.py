"""
AI Chat Service - assistant conversations proxied to Claude

Builds the conversation (system prompt, prior turns, attachment notes)
and maps upstream failures to AIServiceError.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from app.core.exceptions import AIServiceError, ValidationError
from app.core.logging_config import logger
from app.utils.claude_client import ClaudeClient

SYSTEM_PROMPT = (
    "You are the PageCraft assistant, a professional AI helper for people "
    "designing web pages in a no-code editor. Answer concisely and "
    "professionally, in the language the user writes in."
)

CHAT_ROLES = ("user", "assistant")
MAX_HISTORY_TURNS = 20


@dataclass(frozen=True)
class AttachmentInfo:
    """What the assistant is told about an uploaded file"""
    name: str
    content_type: str
    size: int

    def describe(self) -> str:
        return f"- {self.name} ({self.content_type or 'unknown'}, {self.size} bytes)"


def parse_history(raw: Optional[str]) -> List[Dict[str, str]]:
    """
    Decode the JSON history form field into Claude messages.

    Only user/assistant turns with text content are kept, leading assistant
    turns are dropped, and at most MAX_HISTORY_TURNS recent turns survive.
    """
    if raw is None or not raw.strip():
        return []
    try:
        history = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError("history must be a JSON array", field="history") from e
    if not isinstance(history, list):
        raise ValidationError("history must be a JSON array", field="history")

    turns = []
    for entry in history:
        if not isinstance(entry, dict):
            continue
        role = entry.get("role")
        content = entry.get("content")
        if role in CHAT_ROLES and isinstance(content, str) and content.strip():
            turns.append({"role": role, "content": content})

    turns = turns[-MAX_HISTORY_TURNS:]
    while turns and turns[0]["role"] != "user":
        turns.pop(0)
    return turns


def build_user_message(message: str, attachments: Sequence[AttachmentInfo] = ()) -> str:
    if not attachments:
        return message
    listing = "\n".join(attachment.describe() for attachment in attachments)
    return f"{message}\nAttached files:\n{listing}"


class AIChatService:
    """Single-turn chat on top of a client-held history"""

    def __init__(self, client: ClaudeClient):
        self.client = client

    async def chat(
        self,
        message: str,
        history: Optional[List[Dict[str, str]]] = None,
        attachments: Sequence[AttachmentInfo] = (),
    ) -> str:
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message cannot be empty", field="message")

        prompt = build_user_message(message.strip(), attachments)
        try:
            result: Dict[str, Any] = await self.client.generate(
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                messages=history or [],
            )
        except Exception as e:
            logger.log_error_with_context(e, context="ai_chat", history_turns=len(history or []))
            raise AIServiceError() from e

        content = result.get("content") or ""
        if not content.strip():
            raise AIServiceError("AI service returned an empty reply")
        return content
