"""Column value sanitizers for Monday.com.

Each sanitizer turns an arbitrary external value into the JSON shape the
matching Monday column type accepts in ``column_values``. Sanitizers never
raise: malformed input degrades to an empty value of the right shape, and
``None`` means "leave this column out of the payload".
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from qbo_monday.integrations.monday.models import ColumnType

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
DEFAULT_PHONE_COUNTRY = "US"

_NON_NUMERIC = re.compile(r"[^\d.]")
_NON_DIGIT = re.compile(r"\D")
_DATE_FORMATS = ("%Y/%m/%d", "%m/%d/%Y", "%d.%m.%Y", "%b %d, %Y", "%B %d, %Y")


def sanitize_text(value: Any) -> str | None:
    """Trimmed string form of ``value``; None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def sanitize_email(value: Any) -> dict[str, str] | None:
    if value is None:
        return None
    if not value:
        return {"email": "", "text": ""}
    text = str(value).strip().lower()
    return {
        "email": text if EMAIL_PATTERN.match(text) else "",
        "text": text,
    }


def sanitize_phone(value: Any) -> dict[str, str] | None:
    if value is None:
        return None
    if not value:
        return {"phone": "", "countryShortName": DEFAULT_PHONE_COUNTRY}
    return {
        "phone": _NON_DIGIT.sub("", str(value)),
        "countryShortName": DEFAULT_PHONE_COUNTRY,
    }


def sanitize_numbers(value: Any) -> int | float | None:
    """Extract a signed number from ``value``.

    Currency symbols, thousands separators and other noise are dropped, a
    leading minus sign is kept and any dot after the first one is removed,
    so ``"-$1,234.56"`` becomes ``-1234.56`` and ``"1.2.3"`` becomes ``1.23``.

    Returns:
        An int when no decimal point remains, a float otherwise, or None
        when nothing numeric is left.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if isinstance(value, (Mapping, list, tuple, set)):
        return None

    text = str(value).strip()
    if not text:
        return None

    negative = text.startswith("-")
    cleaned = _NON_NUMERIC.sub("", text)
    first_dot = cleaned.find(".")
    if first_dot >= 0:
        cleaned = cleaned[: first_dot + 1] + cleaned[first_dot + 1 :].replace(".", "")

    if not any(ch.isdigit() for ch in cleaned):
        return None

    number: int | float = float(cleaned) if "." in cleaned else int(cleaned)
    return -number if negative else number


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def sanitize_date(value: Any) -> dict[str, str | None] | None:
    if value is None:
        return None
    if not value:
        return {"date": None}
    parsed = _parse_date(value)
    if parsed is None:
        logger.debug("Unparseable date value: %r", value)
        return {"date": None}
    return {"date": parsed.strftime("%Y-%m-%d")}


def sanitize_status(value: Any) -> dict[str, str] | None:
    if value is None:
        return None
    if not value:
        return {"label": ""}
    return {"label": str(value).strip()}


def sanitize_dropdown(value: Any) -> dict[str, list[str]] | None:
    """Dropdown labels from a sequence, a set (sorted), a comma-separated string or a scalar."""
    if value is None:
        return None
    if not value:
        return {"labels": []}

    if isinstance(value, (list, tuple)):
        items = list(value)
    elif isinstance(value, (set, frozenset)):
        items = sorted(value, key=str)
    elif isinstance(value, str):
        items = value.split(",")
    else:
        items = [value]

    labels = [str(item).strip() for item in items if item is not None]
    return {"labels": [label for label in labels if label]}


def sanitize_checkbox(value: Any) -> dict[str, bool] | None:
    if value is None:
        return None
    return {"checked": bool(value)}


def _first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def sanitize_location(value: Any) -> dict[str, str] | None:
    """Location from a lat/lng mapping, a JSON string or a plain address."""
    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            return {"address": text}
        if not isinstance(parsed, Mapping):
            return {"address": text}
        value = parsed

    if not isinstance(value, Mapping):
        return None

    lat = _first_present(value, ("lat", "latitude"))
    lng = _first_present(value, ("lng", "longitude"))
    if lat is None or lng is None:
        return None
    return {
        "lat": str(lat),
        "lng": str(lng),
        "address": str(value.get("address") or ""),
    }


def sanitize_board_relation(value: Any) -> dict[str, list[str]] | None:
    if not isinstance(value, Mapping):
        return None
    item_ids = value.get("item_ids")
    if not isinstance(item_ids, (list, tuple)):
        return None
    return {"item_ids": [str(item_id) for item_id in item_ids]}


SANITIZERS: dict[str, Callable[[Any], Any]] = {
    ColumnType.TEXT: sanitize_text,
    ColumnType.LONG_TEXT: sanitize_text,
    ColumnType.EMAIL: sanitize_email,
    ColumnType.PHONE: sanitize_phone,
    ColumnType.NUMBERS: sanitize_numbers,
    ColumnType.DATE: sanitize_date,
    ColumnType.STATUS: sanitize_status,
    ColumnType.DROPDOWN: sanitize_dropdown,
    ColumnType.CHECKBOX: sanitize_checkbox,
    ColumnType.LOCATION: sanitize_location,
    ColumnType.BOARD_RELATION: sanitize_board_relation,
}


def sanitize_value_for_column_type(value: Any, column_type: str) -> Any:
    """Sanitize ``value`` for a column of ``column_type``.

    Unknown column types pass the value through unchanged.
    """
    sanitizer = SANITIZERS.get(column_type)
    if sanitizer is None:
        logger.debug("No sanitizer for column type %r, passing value through", column_type)
        return value
    return sanitizer(value)
