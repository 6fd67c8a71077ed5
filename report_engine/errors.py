"""Report Engine Errors"""


class ReportEngineError(Exception):
    """Base class for every failure raised by the report engine."""


class FileIngestionError(ReportEngineError):
    """Reading or decoding one uploaded file failed."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Could not ingest '{name}': {reason}")
        self.name = name
        self.reason = reason


class RecordNotFoundError(ReportEngineError, KeyError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]


class NothingSelectedError(ReportEngineError):
    """Analysis was requested with an empty file selection."""


class CredentialsNotConfiguredError(ReportEngineError):
    """The provider API key is missing; raised before any network call."""

    def __init__(self, provider: str, env_var: str):
        super().__init__(f"{env_var} not set. Configure the {provider} API key in .env and restart the server.")
        self.provider = provider
        self.env_var = env_var


class AnalysisRequestError(ReportEngineError):
    """The remote model call failed (network, provider-side error)."""


class MalformedAnalysisReplyError(ReportEngineError):
    """The model replied with something that is not a schema-conforming JSON object."""

    def __init__(self, reason: str, raw_reply: str = ""):
        super().__init__(f"Model reply could not be parsed: {reason}")
        self.reason = reason
        self.raw_reply = raw_reply


class ExportError(ReportEngineError):
    """Rendering an export document failed."""
