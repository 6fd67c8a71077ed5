"""Anthropic (Claude) adapter."""
import json
import logging
from typing import Any

import anthropic

from report_engine.errors import MalformedAnalysisReplyError
from report_engine.providers.base import TOOL_NAME, AnalysisProvider, InlinePart, Part, inline_as_text

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


def _content_block(part: Part) -> dict[str, Any]:
    if not isinstance(part, InlinePart):
        return {"type": "text", "text": part.text}
    if part.mime_type in IMAGE_TYPES:
        return {
            "type": "image",
            "source": {"type": "base64", "media_type": part.mime_type, "data": part.data},
        }
    if part.mime_type == "application/pdf":
        return {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": part.data},
            "title": part.name,
        }
    return {"type": "text", "text": inline_as_text(part)}


class AnthropicProvider(AnalysisProvider):
    name = "anthropic"

    def __init__(self, api_key: str, model: str, max_tokens: int = 8192):
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, parts: list[Part], instructions: str, schema: dict[str, Any]) -> str:
        content = [_content_block(p) for p in parts]
        content.append({"type": "text", "text": instructions})
        # A single forced tool call makes the model emit input that matches the schema
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            tools=[{
                "name": TOOL_NAME,
                "description": "Submit the finished market analysis report.",
                "input_schema": schema,
            }],
            tool_choice={"type": "tool", "name": TOOL_NAME},
            messages=[{"role": "user", "content": content}],
        )
        stop_reason = getattr(response, "stop_reason", None)
        raw = None
        for block in response.content or []:
            if getattr(block, "type", None) == "tool_use":
                raw = json.dumps(block.input, ensure_ascii=False)
                break
        if raw is None:
            raw = "".join(getattr(block, "text", "") or "" for block in response.content or [])
        # Tool input cut off at the token limit is incomplete even when it parses
        if stop_reason == "max_tokens":
            raise MalformedAnalysisReplyError(f"reply was cut off at the {self.max_tokens}-token limit", raw)
        if not raw:
            logger.warning("Claude reply was empty (stop_reason=%s)", stop_reason)
        return raw
