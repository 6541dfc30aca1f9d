"""Per-board schema cache keyed by column description tags.

Column descriptions on a Monday board embed tags such as ``{client_id}``,
``{{client_id}}`` or ``{{{client_id}}}``; the brace count carries no
meaning. A board's schema map associates every tag with the column that
declares it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Protocol

from qbo_monday.integrations.monday.models import ColumnDescriptor

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"\{+[^{}]+\}+")

SchemaMap = dict[str, ColumnDescriptor]


class ColumnSource(Protocol):
    async def fetch_board_columns(self, board_id: str | int) -> list[ColumnDescriptor]: ...


def extract_tags(description: str | None) -> list[str]:
    """Return the tags embedded in a column description, in order of appearance."""
    if not description:
        return []
    tags = (match.group(0).strip("{}") for match in TAG_PATTERN.finditer(description))
    return [tag for tag in tags if tag.strip()]


def build_schema_map(columns: Iterable[ColumnDescriptor]) -> SchemaMap:
    """Map every tag found in the column descriptions to its column.

    When two columns declare the same tag the later column wins.
    """
    schema: SchemaMap = {}
    for column in columns:
        for tag in extract_tags(column.description):
            if tag in schema and schema[tag].id != column.id:
                logger.warning(
                    "Tag '%s' declared by columns %s and %s, using %s",
                    tag, schema[tag].id, column.id, column.id,
                )
            schema[tag] = column
    return schema


class SchemaCache:
    """Lazily fetched, explicitly invalidated schema maps per board.

    No locking: two concurrent first lookups of the same board both fetch,
    and the last one to finish is stored.
    """

    def __init__(self, source: ColumnSource) -> None:
        self._source = source
        self._schemas: dict[str, SchemaMap] = {}

    async def get(self, board_id: str | int) -> SchemaMap:
        """Return the schema map of a board, fetching it on first use."""
        key = str(board_id)
        cached = self._schemas.get(key)
        if cached is not None:
            logger.debug("Schema cache hit for board %s", key)
            return cached

        columns = await self._source.fetch_board_columns(board_id)
        schema = build_schema_map(columns)
        self._schemas[key] = schema
        logger.info("Cached schema for board %s: %d columns, %d tags", key, len(columns), len(schema))
        return schema

    def invalidate(self, board_id: str | int | None = None) -> None:
        """Drop one board's schema, or every cached schema when ``board_id`` is None."""
        if board_id is None:
            self._schemas.clear()
        else:
            self._schemas.pop(str(board_id), None)

    def __contains__(self, board_id: object) -> bool:
        return str(board_id) in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)
