"""Download header helpers"""
from urllib.parse import quote


def content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII file names (RFC 6266 / 5987)."""
    return f"attachment; filename*=UTF-8''{quote(filename)}"
