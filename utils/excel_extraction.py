# utils/excel_extraction.py
import logging
import re
import pandas as pd
from io import BytesIO
from typing import Any, Dict, List, Optional

from config import COLUMN_ALIASES

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 10


class AttendanceUploadError(Exception):
    """Structural problem with an uploaded sheet, reported to the caller as is."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalize_header(header: Any) -> str:
    key = str(header).replace("\n", " ").replace("\r", " ")
    key = re.sub(r"[\s\-_./]+", " ", key)
    return key.strip().lower()


def canonical_column(header: Any) -> Optional[str]:
    """Map a sheet header onto one of the known columns, or None."""
    key = normalize_header(header)
    for canonical, aliases in COLUMN_ALIASES.items():
        if key == normalize_header(canonical) or key in aliases:
            return canonical
    return None


def get_cell(row: Dict[str, Any], column: str) -> Any:
    if column in row:
        return row[column]
    for key, value in row.items():
        if canonical_column(key) == column:
            return value
    return None


def clean_columns(columns):
    cleaned = []
    for i, col in enumerate(columns):
        if pd.isna(col) or "unnamed" in str(col).lower() or not str(col).strip():
            cleaned.append(f"Column_{i+1}")
        else:
            cleaned.append(str(col).strip())
    return cleaned


def detect_header_row(preview_df: pd.DataFrame) -> int:
    """
    Find the row holding the column titles. Exported sheets often carry a
    title or company banner above the table, so the first rows are scanned
    for the one naming the most known columns.
    """
    best_row, best_matches = 0, 0
    for i in range(min(len(preview_df), HEADER_SCAN_ROWS)):
        row = preview_df.iloc[i]
        matched = {canonical_column(cell) for cell in row if not pd.isna(cell)}
        matched.discard(None)
        if len(matched) >= 2 and len(matched) > best_matches:
            best_row, best_matches = i, len(matched)
    return best_row


def _load_first_sheet(contents: bytes, filename: Optional[str]) -> pd.DataFrame:
    if filename and filename.lower().endswith(".csv"):
        return pd.read_csv(BytesIO(contents), header=None, skip_blank_lines=True)

    with pd.ExcelFile(BytesIO(contents)) as excel_file:
        if not excel_file.sheet_names:
            raise AttendanceUploadError("Excel file is empty")
        return excel_file.parse(excel_file.sheet_names[0], header=None)


def read_attendance_rows(contents: bytes, filename: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Decode an uploaded xlsx/xls/csv payload into one dict per data row.

    Only the first sheet is read. Headers recognised through the alias table
    are renamed to their canonical form, other headers are kept as written.
    Missing cells come back as None.
    """
    if not contents:
        raise AttendanceUploadError("No file uploaded")

    try:
        raw_df = _load_first_sheet(contents, filename)
    except AttendanceUploadError:
        raise
    except Exception as e:
        logger.warning("Could not decode %s: %s", filename or "upload", e)
        raise AttendanceUploadError("Unable to read spreadsheet")

    raw_df = raw_df.dropna(how="all")
    if raw_df.empty:
        raise AttendanceUploadError("No data found in sheet")

    header_row = detect_header_row(raw_df)
    headers = clean_columns(raw_df.iloc[header_row].tolist())
    columns = [canonical_column(h) or h for h in headers]
    logger.debug("Header row %d resolved to %s", header_row, columns)

    data_df = raw_df.iloc[header_row + 1:].copy()
    data_df.columns = columns
    data_df = data_df.astype(object).where(pd.notna(data_df), None)

    rows = data_df.to_dict(orient="records")
    if not rows:
        raise AttendanceUploadError("No data found in sheet")
    return rows
