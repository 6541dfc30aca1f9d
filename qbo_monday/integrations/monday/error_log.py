"""Write workflow error records to a Monday.com error-log board.

The board layout is fixed: each record field is written to the column
configured for it. Failures to save the record never propagate; the caller
gets a result whose ``monday_id`` is 0 and whose ``error`` explains why.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from qbo_monday.integrations.monday.client import MondayApiClient
from qbo_monday.integrations.monday.mapper import build_column_values

logger = logging.getLogger(__name__)

ERROR_LOG_FIELDS = ("client", "description", "error", "payload", "workflow", "project", "error_type")
SAVE_ERROR_PREFIX = "***ERROR SAVING TO MONDAY - "


@dataclass
class ErrorLogRecord:
    """One workflow failure to be recorded."""

    client: str = ""
    description: str = ""
    error: str = ""
    payload: Any = None
    workflow: str = ""
    project: str = ""
    error_type: str = ""


def _encode_payload(payload: Any) -> Any:
    if payload is None or isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload, default=str)
    except (TypeError, ValueError):
        return str(payload)


async def log_error(
    client: MondayApiClient,
    board_id: str | int,
    columns: Mapping[str, Mapping[str, Any]],
    record: ErrorLogRecord,
    *,
    item_name: str | None = None,
) -> dict[str, Any]:
    """Create an error-log item for ``record``.

    Args:
        client: Monday API client.
        board_id: The error-log board.
        columns: Record field name -> ``{"monday_id": ..., "type": ...}``.
            Fields without a monday_id or with a mirror type are skipped.
        record: The error to log.
        item_name: Item name; defaults to ``"<error_type>: <client>"``.

    Returns:
        ``{"monday_id": <item id>, "error": ""}`` on success, or
        ``{"monday_id": 0, "error": "***ERROR SAVING TO MONDAY - ..."}``
        when the item could not be created.
    """
    name = item_name or f"{record.error_type or 'Error'}: {record.client or 'unknown'}"

    try:
        values = asdict(record)
        values["payload"] = _encode_payload(record.payload)
        rules = {
            key: {**dict(columns[key]), "value": values[key]}
            for key in ERROR_LOG_FIELDS
            if key in columns
        }
        column_values = build_column_values(rules)
        item = await client.create_item(board_id, name, column_values)
    except Exception as exc:
        logger.error("Could not save error record to board %s: %s", board_id, exc)
        return {"monday_id": 0, "error": f"{SAVE_ERROR_PREFIX}{exc}"}

    return {"monday_id": item["id"], "error": ""}
