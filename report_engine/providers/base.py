"""Provider interface and the provider-neutral request parts."""
import base64
from dataclasses import dataclass
from typing import Any, Union

from report_engine.classifier import is_spreadsheet
from report_engine.spreadsheet import spreadsheet_to_text

TOOL_NAME = "submit_market_analysis"


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class InlinePart:
    """Base64 payload tagged with its declared media type."""
    name: str
    mime_type: str
    data: str

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


Part = Union[TextPart, InlinePart]


def stub_text(name: str, mime_type: str) -> str:
    return f"File name: {name}\nType: {mime_type}\n"


def inline_as_text(part: InlinePart) -> str:
    """
    Text rendering of a binary part for providers that cannot take it natively:
    spreadsheets are flattened to CSV, anything else becomes a metadata stub.
    """
    if is_spreadsheet(part.mime_type):
        flattened = spreadsheet_to_text(part.raw_bytes(), part.mime_type, part.name)
        if flattened:
            return f"File name: {part.name}\nContent:\n{flattened}\n"
    return stub_text(part.name, part.mime_type)


class AnalysisProvider:
    """Strategy interface: one structured-output call against a hosted model."""
    name = ""

    async def generate(self, parts: list[Part], instructions: str, schema: dict[str, Any]) -> str:
        """Send parts + instructions, ask for JSON matching ``schema``, return the raw reply text."""
        raise NotImplementedError
