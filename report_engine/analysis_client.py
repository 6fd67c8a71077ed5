"""Analysis Client - turn selected records into one structured model request."""
import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from report_engine.classifier import PDF_MIME_TYPE, is_office_document
from report_engine.errors import (
    AnalysisRequestError,
    CredentialsNotConfiguredError,
    MalformedAnalysisReplyError,
    NothingSelectedError,
    ReportEngineError,
)
from report_engine.file_reader import split_data_url
from report_engine.prompts import build_instructions, describe_schema, format_customers, output_schema
from report_engine.providers import PROVIDER_ENV_VARS, AnalysisProvider, InlinePart, Part, TextPart, create_provider
from report_engine.schemas import (
    RESULT_MODELS,
    AnalysisVariant,
    CustomerRecord,
    FileRecord,
    MarketAnalysis,
    PreviewCategory,
)

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, str, str, int], AnalysisProvider]


def _is_model_readable(media_type: str) -> bool:
    return media_type.startswith("image/") or media_type == PDF_MIME_TYPE or is_office_document(media_type)


def build_file_part(record: FileRecord) -> Part:
    """
    One part per file, never dropped: binary content goes out as a tagged base64
    payload, text as a named text block, anything without usable content as a
    name + type stub.
    """
    if record.preview_type != PreviewCategory.TEXT:
        parsed = split_data_url(record.content)
        if parsed and parsed[1] and _is_model_readable(record.type):
            return InlinePart(name=record.name, mime_type=record.type, data=parsed[1])
    elif record.content:
        return TextPart(f"File name: {record.name}\nContent: {record.content}\n")
    return TextPart(f"File name: {record.name}\nType: {record.type}\n")


def parse_reply(raw: Optional[str], variant: AnalysisVariant) -> MarketAnalysis:
    """Validate the model's JSON reply against the variant's result model."""
    text = (raw or "").strip() or "{}"
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedAnalysisReplyError(f"invalid JSON ({e.msg} at position {e.pos})", raw or "") from e
    if not isinstance(payload, dict):
        raise MalformedAnalysisReplyError(f"expected a JSON object, got {type(payload).__name__}", raw or "")
    # An empty reply stays an empty result; a partial one is rejected
    if payload:
        missing = [key for key in output_schema(variant)["required"] if key not in payload]
        if missing:
            raise MalformedAnalysisReplyError(f"reply is missing required field(s): {', '.join(missing)}", raw or "")
    try:
        return RESULT_MODELS[variant].model_validate(payload)
    except ValidationError as e:
        raise MalformedAnalysisReplyError(f"reply does not match the output schema: {e.error_count()} error(s)", raw or "") from e


class AnalysisClient:
    """
    Stateless and reentrant: every ``analyze`` call resolves credentials, builds
    the request and makes exactly one remote attempt.
    """

    def __init__(
        self,
        provider_name: str,
        api_key_lookup: Callable[[str], Optional[str]],
        model: str,
        language: str = "English",
        max_tokens: int = 8192,
        provider_factory: ProviderFactory = create_provider,
    ):
        if provider_name not in PROVIDER_ENV_VARS:
            raise ValueError(f"Unknown analysis provider: {provider_name!r}")
        self.provider_name = provider_name
        self.api_key_lookup = api_key_lookup
        self.model = model
        self.language = language
        self.max_tokens = max_tokens
        self.provider_factory = provider_factory

    def credentials_configured(self) -> bool:
        return bool(self.api_key_lookup(self.provider_name))

    def build_parts(
        self,
        files: list[FileRecord],
        variant: AnalysisVariant,
        customers: Optional[list[CustomerRecord]] = None,
    ) -> list[Part]:
        parts = [build_file_part(f) for f in files]
        if variant == AnalysisVariant.CUSTOMER and customers:
            parts.append(TextPart(format_customers(customers)))
        return parts

    async def analyze(
        self,
        files: list[FileRecord],
        variant: AnalysisVariant = AnalysisVariant.GENERAL,
        customers: Optional[list[CustomerRecord]] = None,
    ) -> MarketAnalysis:
        if not files:
            raise NothingSelectedError("Select at least one report to analyze.")
        # Read the key at call time, before any client object exists
        api_key = self.api_key_lookup(self.provider_name)
        if not api_key:
            raise CredentialsNotConfiguredError(self.provider_name, PROVIDER_ENV_VARS[self.provider_name])

        parts = self.build_parts(files, variant, customers)
        instructions = build_instructions(variant, self.language) + "\n\n" + describe_schema(variant)
        logger.info(
            "Running %s analysis on %d file(s) via %s/%s",
            variant.value, len(files), self.provider_name, self.model,
        )
        try:
            provider = self.provider_factory(self.provider_name, api_key, self.model, self.max_tokens)
            raw = await provider.generate(parts, instructions, output_schema(variant))
        except ReportEngineError:
            raise
        except Exception as e:
            logger.exception("%s call failed", self.provider_name)
            raise AnalysisRequestError(f"LLM processing failed: {e}") from e
        return parse_reply(raw, variant)
