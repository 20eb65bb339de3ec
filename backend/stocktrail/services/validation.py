import math
from typing import Any, Dict, Mapping

from stocktrail.core.errors import ValidationError

REQUIRED_FIELDS = ("name", "unit", "category", "brand", "status")

STOCK_ERROR = "Stock must be a non-negative number."

# largest value a 32-bit INTEGER column holds on every supported store
MAX_STOCK = 2**31 - 1


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def parse_stock(value: Any) -> int:
    """Turn a stock cell/body value into a non-negative int or raise."""
    if value is None or isinstance(value, bool):
        raise ValidationError(STOCK_ERROR)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(STOCK_ERROR)

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(STOCK_ERROR)

    if not math.isfinite(number) or number < 0 or number > MAX_STOCK or not number.is_integer():
        raise ValidationError(STOCK_ERROR)

    return int(number)


def validate_product_data(data: Mapping[str, Any]) -> None:
    for field in REQUIRED_FIELDS:
        if _is_blank(data.get(field)):
            raise ValidationError(f"Product field '{field}' is required.")

    parse_stock(data.get("stock"))


def normalize_product_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape already-validated input the way it is stored."""
    image = data.get("image")
    return {
        **{field: str(data[field]).strip() for field in REQUIRED_FIELDS},
        "stock": parse_stock(data.get("stock")),
        "image": None if _is_blank(image) else str(image).strip(),
    }
