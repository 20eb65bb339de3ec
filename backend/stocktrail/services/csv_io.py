import csv
import io
from datetime import datetime
from typing import Any, Dict, Iterable, List

from stocktrail.core.errors import ValidationError

# fixed export order; import accepts the same header (lower-cased)
EXPORT_COLUMNS = (
    "id",
    "name",
    "unit",
    "category",
    "brand",
    "stock",
    "status",
    "image",
    "createdAt",
    "updatedAt",
)

_ATTRIBUTES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def parse_csv(content: bytes) -> List[Dict[str, Any]]:
    """
    Read an uploaded CSV into row dicts.

    Headers are lower-cased and trimmed so "Name " and "name" both map to
    the `name` field. Cells are passed through untouched; validation is the
    service's job.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Failed to parse CSV file: {e}") from e

    try:
        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            raise ValidationError("Failed to parse CSV file: missing header row")
        reader.fieldnames = [(h or "").strip().lower() for h in reader.fieldnames]
        return [dict(row) for row in reader]
    except csv.Error as e:
        raise ValidationError(f"Failed to parse CSV file: {e}") from e


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return value


def generate_csv(products: Iterable[Any]) -> str:
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(EXPORT_COLUMNS)

    for p in products:
        w.writerow([_cell(getattr(p, _ATTRIBUTES.get(col, col))) for col in EXPORT_COLUMNS])

    return buf.getvalue()
