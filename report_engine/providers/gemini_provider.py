"""Gemini adapter. Gemini reads every declared media type natively, office formats included."""
from typing import Any

from google import genai
from google.genai import types

from report_engine.providers.base import AnalysisProvider, InlinePart, Part


class GeminiProvider(AnalysisProvider):
    name = "gemini"

    def __init__(self, api_key: str, model: str):
        self.client = genai.Client(api_key=api_key)
        self.model = model

    async def generate(self, parts: list[Part], instructions: str, schema: dict[str, Any]) -> str:
        contents = []
        for part in parts:
            if isinstance(part, InlinePart):
                contents.append(types.Part.from_bytes(data=part.raw_bytes(), mime_type=part.mime_type))
            else:
                contents.append(types.Part.from_text(text=part.text))
        contents.append(types.Part.from_text(text=instructions))
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_json_schema=schema,
            ),
        )
        return response.text or ""
