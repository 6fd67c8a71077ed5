"""File Classifier - map (declared media type, file name) to a preview category."""
from report_engine.schemas import PreviewCategory

TEXT_MIME_TYPES = ("text/plain",)
TEXT_SUFFIXES = (".txt", ".md", ".json")
PDF_MIME_TYPE = "application/pdf"
DEFAULT_MIME_TYPE = "application/octet-stream"

# Office formats are sent to the model as binary payloads but cannot be previewed
OFFICE_MIME_TYPES = (
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
)
SPREADSHEET_MIME_TYPES = (
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)


def classify(media_type: str, name: str) -> PreviewCategory:
    """
    Decide the preview category. Precedence:
    image/* -> image, application/pdf -> pdf, text/plain or .txt/.md/.json -> text,
    everything else -> unsupported.
    """
    media_type = (media_type or "").strip().lower()
    lower_name = (name or "").lower()
    if media_type.startswith("image/"):
        return PreviewCategory.IMAGE
    if media_type == PDF_MIME_TYPE:
        return PreviewCategory.PDF
    if media_type in TEXT_MIME_TYPES or lower_name.endswith(TEXT_SUFFIXES):
        return PreviewCategory.TEXT
    return PreviewCategory.UNSUPPORTED


def is_office_document(media_type: str) -> bool:
    return (media_type or "").lower() in OFFICE_MIME_TYPES


def is_spreadsheet(media_type: str) -> bool:
    return (media_type or "").lower() in SPREADSHEET_MIME_TYPES
