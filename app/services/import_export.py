"""
Bulk import/export formats

Import accepts a JSON array of objects or CSV with a header row. CSV cells
that look like JSON arrays/objects are decoded so nested product options
and order items survive a CSV round trip. Export writes the same shapes.
"""
import csv
import io
import json
import logging
from typing import Any, Dict, Iterable, List, Tuple

from app.core.exceptions import StoreValidationError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")


def _decode_cell(value: Any) -> Any:
    if value is None:
        return None
    cell = value.strip()
    if cell == "":
        return None
    if cell[0] in "[{":
        try:
            return json.loads(cell)
        except json.JSONDecodeError:
            logger.debug(f"Cell looks like JSON but does not parse, keeping text: {cell[:40]!r}")
    return cell


def parse_csv(text: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        return []
    records = []
    for row in reader:
        record = {
            key.strip(): _decode_cell(value)
            for key, value in row.items()
            if key is not None
        }
        if any(v is not None for v in record.values()):
            records.append(record)
    return records


def parse_import_body(body: bytes, content_type: str = "") -> List[Dict[str, Any]]:
    """
    Decode an import upload into a non-empty list of records.

    Raises StoreValidationError for anything else.
    """
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise StoreValidationError("Import file must be UTF-8") from e

    if "csv" in (content_type or "").lower():
        records = parse_csv(text)
    else:
        try:
            records = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreValidationError("Invalid import data: expected a JSON array or CSV") from e

    if not isinstance(records, list) or not records:
        raise StoreValidationError("Invalid import data: expected a non-empty list of records")
    if not all(isinstance(r, dict) for r in records):
        raise StoreValidationError("Invalid import data: every record must be an object")
    return records


def _encode_cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def to_csv(records: List[Dict[str, Any]]) -> str:
    headers: List[str] = []
    for record in records:
        for key in record:
            if key not in headers:
                headers.append(key)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow([_encode_cell(record.get(h)) for h in headers])
    return buffer.getvalue()


def render_export(records: Iterable[Dict[str, Any]], fmt: str) -> Tuple[str, str]:
    """Returns (content, media_type)."""
    records = list(records)
    if fmt == "csv":
        return to_csv(records), "text/csv; charset=utf-8"
    if fmt == "json":
        return json.dumps(records, ensure_ascii=False, indent=2), "application/json"
    raise StoreValidationError(f"Unsupported export format '{fmt}'", details={"allowed": list(EXPORT_FORMATS)})
