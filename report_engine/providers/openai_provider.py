"""OpenAI adapter."""
from typing import Any

from openai import AsyncOpenAI

from report_engine.providers.base import AnalysisProvider, InlinePart, Part, inline_as_text


def _content_part(part: Part) -> dict[str, Any]:
    if not isinstance(part, InlinePart):
        return {"type": "text", "text": part.text}
    if part.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": part.data_url()}}
    if part.mime_type == "application/pdf":
        return {"type": "file", "file": {"filename": part.name, "file_data": part.data_url()}}
    return {"type": "text", "text": inline_as_text(part)}


class OpenAIProvider(AnalysisProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate(self, parts: list[Part], instructions: str, schema: dict[str, Any]) -> str:
        content = [_content_part(p) for p in parts]
        content.append({"type": "text", "text": instructions})
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": content}],
            response_format={
                "type": "json_schema",
                "json_schema": {"name": "market_analysis", "schema": schema},
            },
        )
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()
