"""Spreadsheet transformer for file-based imports.

Handles:
- Reading .csv (encoding and separator detection) and .xlsx (openpyxl)
- Normalizing header names to record field names
- Dropping empty rows; an empty cell is an absent field, not a null

The resulting list of dicts goes through the same batch pipeline as JSON
imports.
"""

import io
import os
import re
import uuid
from datetime import date, datetime
from typing import Any, Dict, List

import pandas as pd

from erp_import.config import get_settings
from erp_import.core.exceptions import ValidationError

settings = get_settings()

SUPPORTED_EXTENSIONS = ("csv", "xlsx")

# Spreadsheet header aliases that do not normalize to the field name on their own
COLUMN_ALIASES = {
    "part_number": "sku",
    "item_number": "sku",
    "product_name": "name",
    "item_description": "description",
    "uom": "unit_of_measure",
    "internal_part": "internal_part_number",
    "customer_part": "customer_part_number",
    "supplier_part": "supplier_part_number",
}


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def normalize_column_name(col: Any) -> str:
    """'Unit Cost ' -> 'unit_cost', 'Lead-Time Days' -> 'lead_time_days'."""
    name = re.sub(r"[\s\-]+", "_", str(col).strip().lower())
    name = re.sub(r"[^0-9a-z_]", "", name)
    return COLUMN_ALIASES.get(name, name)


def _detect_encoding(content: bytes) -> str:
    for enc in ("utf-8-sig", "utf-8", "cp1252"):
        try:
            content[:4096].decode(enc)
            return enc
        except UnicodeDecodeError:
            continue
    return "latin-1"  # Never raises on any byte


def _detect_separator(content: bytes, encoding: str) -> str:
    first_line = content.decode(encoding, errors="replace").splitlines()[0] if content else ""
    if ";" in first_line:
        return ";"
    if "\t" in first_line:
        return "\t"
    return ","


def _read_csv(content: bytes) -> pd.DataFrame:
    encoding = _detect_encoding(content)
    sep = _detect_separator(content, encoding)
    # Everything as text: SKUs like 00123 must keep their leading zeros
    return pd.read_csv(io.BytesIO(content), encoding=encoding, sep=sep, dtype=str, on_bad_lines="skip")


def _read_xlsx(content: bytes) -> pd.DataFrame:
    return pd.read_excel(io.BytesIO(content), engine="openpyxl", sheet_name=0, dtype=object)


def _to_python(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "item"):
        return value.item()
    return value


def dataframe_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df = df.rename(columns=normalize_column_name)
    df = df.loc[:, [c for c in df.columns if c and not c.startswith("unnamed")]]
    df = df.dropna(how="all")

    records = []
    for _, row in df.iterrows():
        record = {
            col: _to_python(value)
            for col, value in row.items()
            if not pd.isna(value) and not (isinstance(value, str) and not value.strip())
        }
        if record:
            records.append(record)
    return records


def read_records(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """Parse an uploaded spreadsheet into import records."""
    ext = file_extension(filename or "")
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValidationError("Only .csv and .xlsx files are accepted")

    try:
        df = _read_xlsx(content) if ext == "xlsx" else _read_csv(content)
    except (ValueError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError("Could not read the uploaded file", {"error": str(e)}) from e

    return dataframe_to_records(df)


def archive_upload(filename: str, content: bytes) -> str:
    """Keep a copy of the uploaded file under UPLOAD_DIR. Returns its path."""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    safe_name = f"{uuid.uuid4().hex}_{os.path.basename(filename)}"
    file_path = os.path.join(settings.UPLOAD_DIR, safe_name)
    with open(file_path, "wb") as f:
        f.write(content)
    return file_path
