"""Spreadsheet flattening for providers that cannot read office binaries."""
import io
import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

# Cap flattened text per workbook so one spreadsheet cannot crowd out the rest of the request
MAX_SHEET_CHARS = 50_000

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def spreadsheet_to_text(data: bytes, media_type: str, filename: str = "") -> Optional[str]:
    """
    Flatten every sheet of a workbook into CSV text.

    Returns None when the workbook cannot be parsed; callers fall back to a
    metadata stub in that case.
    """
    buffer = io.BytesIO(data)
    engine = "openpyxl" if media_type == XLSX_MIME_TYPE else None
    try:
        sheets = pd.read_excel(buffer, sheet_name=None, header=None, engine=engine)
    except Exception as e:
        logger.warning("Could not flatten spreadsheet %s: %s", filename or media_type, e)
        return None

    parts = []
    for sheet_name, df in sheets.items():
        # Remove completely empty rows and columns
        df = df.dropna(how="all").dropna(axis=1, how="all")
        if df.empty:
            continue
        parts.append(f"# Sheet: {sheet_name}\n{df.to_csv(index=False, header=False).strip()}")
    text = "\n\n".join(parts)
    if len(text) > MAX_SHEET_CHARS:
        text = text[:MAX_SHEET_CHARS] + f"\n\n[Spreadsheet truncated to first {MAX_SHEET_CHARS} characters.]"
    return text
