"""Dynamic mapping engine between external records and Monday.com boards.

A mapping configuration names, per tag, where the value comes from in the
external record (``remote_key``, a dotted path) and whether it is written to
Monday (``in_monday``). The engine resolves the values, looks the tags up in
the board schema and sanitizes each value for the column it lands in.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from qbo_monday.integrations.monday.client import MondayApiClient
from qbo_monday.integrations.monday.models import ColumnType, FieldRule, parse_mapping_config
from qbo_monday.integrations.monday.sanitizers import sanitize_value_for_column_type
from qbo_monday.integrations.monday.schema_cache import SchemaCache, SchemaMap

logger = logging.getLogger(__name__)

_MISSING = object()

MappingConfig = Mapping[str, FieldRule | Mapping[str, Any]]


def resolve_path(data: Any, path: str) -> Any:
    """Resolve a dotted path against nested mappings and sequences.

    Numeric segments index into sequences (``Line.0.Amount``).

    Returns:
        The value at ``path``, or a private sentinel when any segment is
        missing.
    """
    current = data
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not segment.lstrip("-").isdigit():
                return _MISSING
            index = int(segment)
            if not -len(current) <= index < len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def populate_field_rules(
    mapping_config: MappingConfig,
    external_data: Mapping[str, Any],
) -> dict[str, FieldRule]:
    """Copy the configuration and fill each rule's value from the record.

    Rules with ``in_remote`` and a ``remote_key`` take the value at that path
    (run through the rule's translator); when the path does not resolve the
    configured value is kept. Other rules keep their configured value.
    """
    populated = parse_mapping_config(mapping_config)
    for key, rule in populated.items():
        if not (rule.in_remote and rule.remote_key):
            continue
        value = resolve_path(external_data, rule.remote_key)
        if value is _MISSING:
            logger.debug("Path '%s' for '%s' not found in record", rule.remote_key, key)
            continue
        rule.value = rule.translate(value)
    return populated


def build_payload(populated: Mapping[str, FieldRule], schema: SchemaMap) -> dict[str, Any]:
    """Build a column_values payload from populated rules and a schema map.

    Rules with ``in_monday`` false or without a matching tag are skipped, as
    are values the sanitizer reduces to None.
    """
    payload: dict[str, Any] = {}
    for key, rule in populated.items():
        if not rule.in_monday:
            continue
        column = schema.get(key)
        if column is None:
            continue
        sanitized = sanitize_value_for_column_type(rule.value, column.type)
        if sanitized is not None:
            payload[column.id] = sanitized
    return payload


def _is_numeric_zero(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def build_column_values(columns: Mapping[str, FieldRule | Mapping[str, Any]]) -> dict[str, Any]:
    """Build a payload from rules that carry their own ``monday_id`` and ``type``.

    Skips rules without a ``monday_id``, mirror columns, ``in_monday`` false
    and falsy values other than numeric zero.
    """
    payload: dict[str, Any] = {}
    for key, raw in columns.items():
        rule = FieldRule.from_dict(raw)
        monday_id = rule.extra.get("monday_id")
        column_type = str(rule.extra.get("type") or "")
        if not monday_id or column_type == ColumnType.MIRROR or not rule.in_monday:
            continue
        if not rule.value and not _is_numeric_zero(rule.value):
            continue
        sanitized = sanitize_value_for_column_type(rule.value, column_type)
        if sanitized is None:
            logger.debug("Value for '%s' sanitized to nothing, skipping", key)
            continue
        payload[str(monday_id)] = sanitized
    return payload


class MondayDynamicMapper:
    """Maps external records onto Monday boards through tagged columns.

    The mapper owns a SchemaCache; pass one in to share it between mappers.
    """

    def __init__(self, client: MondayApiClient, schema_cache: SchemaCache | None = None) -> None:
        self._client = client
        self._schema_cache = schema_cache if schema_cache is not None else SchemaCache(client)

    @property
    def schema_cache(self) -> SchemaCache:
        return self._schema_cache

    def populate_mapping(
        self,
        mapping_config: MappingConfig,
        external_data: Mapping[str, Any],
    ) -> dict[str, FieldRule]:
        return populate_field_rules(mapping_config, external_data)

    async def get_board_schema(self, board_id: str | int) -> SchemaMap:
        return await self._schema_cache.get(board_id)

    def clear_cache(self, board_id: str | int | None = None) -> None:
        self._schema_cache.invalidate(board_id)

    async def process_mapping(
        self,
        mapping_config: MappingConfig,
        external_data: Mapping[str, Any],
        board_id: str | int,
    ) -> dict[str, Any]:
        """Turn an external record into a column_values payload for a board.

        Args:
            mapping_config: Tag -> field rule configuration.
            external_data: The external record; never modified.
            board_id: Board whose tagged columns receive the values.

        Returns:
            Column id -> sanitized value.
        """
        populated = self.populate_mapping(mapping_config, external_data)
        schema = await self.get_board_schema(board_id)
        payload = build_payload(populated, schema)
        logger.debug(
            "Mapped %d of %d configured fields onto board %s",
            len(payload), len(populated), board_id,
        )
        return payload

    async def create_or_update_item(
        self,
        board_id: str | int,
        mapping_config: MappingConfig,
        external_data: Mapping[str, Any],
        item_name: str,
        item_id: str | int | None = None,
    ) -> dict[str, Any]:
        """Map a record and write it to Monday.

        Updates ``item_id`` when given, otherwise creates a new item named
        ``item_name``.

        Returns:
            ``{"id": ..., "name": ...}`` as reported by Monday.
        """
        column_values = await self.process_mapping(mapping_config, external_data, board_id)
        if item_id not in (None, ""):
            logger.info("Updating item %s on board %s (%d columns)", item_id, board_id, len(column_values))
            return await self._client.update_item(item_id, board_id, column_values)

        logger.info("Creating item '%s' on board %s (%d columns)", item_name, board_id, len(column_values))
        return await self._client.create_item(board_id, item_name, column_values)
