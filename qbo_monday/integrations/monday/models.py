"""Data model for Monday.com boards and mapping configurations."""

from __future__ import annotations

import copy
import enum
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


class ColumnType(enum.StrEnum):
    """Monday.com column type names handled by the sanitizers."""

    TEXT = "text"
    LONG_TEXT = "long_text"
    EMAIL = "email"
    PHONE = "phone"
    NUMBERS = "numbers"
    DATE = "date"
    STATUS = "status"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    LOCATION = "location"
    BOARD_RELATION = "board_relation"
    MIRROR = "mirror"


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column of a Monday.com board.

    Attributes:
        id: Column identifier used as the key in column_values payloads.
        title: Display title.
        type: Monday column type name; unknown types are kept verbatim.
        description: Free text that may embed {tags}.
        settings: Decoded ``settings_str`` blob.
    """

    id: str
    title: str = ""
    type: str = ""
    description: str = ""
    settings: dict[str, Any] = field(default_factory=dict)

    def __hash__(self) -> int:
        # settings is a dict; equal descriptors still agree on these fields
        return hash((self.id, self.title, self.type, self.description))

    @classmethod
    def from_api(cls, node: Mapping[str, Any]) -> ColumnDescriptor:
        """Build a descriptor from a ``boards { columns { ... } }`` node."""
        raw_settings = node.get("settings_str") or node.get("settings") or {}
        settings: dict[str, Any] = {}
        if isinstance(raw_settings, str):
            try:
                decoded = json.loads(raw_settings)
            except json.JSONDecodeError:
                logger.debug("Unparseable settings_str on column %s", node.get("id"))
            else:
                if isinstance(decoded, dict):
                    settings = decoded
        elif isinstance(raw_settings, Mapping):
            settings = dict(raw_settings)

        return cls(
            id=str(node.get("id", "")),
            title=node.get("title") or "",
            type=node.get("type") or "",
            description=node.get("description") or "",
            settings=settings,
        )


_CORE_RULE_KEYS = frozenset({"remote_key", "in_monday", "in_remote", "value", "translator"})


@dataclass
class FieldRule:
    """How to source and route one value of a mapping configuration.

    Keys other than the core ones (``monday_id``, ``type``, labels, ...)
    are kept in ``extra`` and written back by ``to_dict``.
    """

    remote_key: str | None = None
    in_monday: bool = True
    in_remote: bool = True
    value: Any = None
    translator: dict[Any, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: FieldRule | Mapping[str, Any]) -> FieldRule:
        """Build an independent FieldRule from a dict or another rule."""
        if isinstance(raw, FieldRule):
            return copy.deepcopy(raw)

        data = copy.deepcopy(dict(raw))
        remote_key = data.get("remote_key")
        translator = data.get("translator")
        return cls(
            remote_key=str(remote_key) if remote_key else None,
            in_monday=bool(data.get("in_monday", True)),
            in_remote=bool(data.get("in_remote", True)),
            value=data.get("value"),
            translator=dict(translator) if isinstance(translator, Mapping) else None,
            extra={k: v for k, v in data.items() if k not in _CORE_RULE_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = dict(self.extra)
        result.update(
            {
                "remote_key": self.remote_key,
                "in_monday": self.in_monday,
                "in_remote": self.in_remote,
                "value": self.value,
            }
        )
        if self.translator is not None:
            result["translator"] = dict(self.translator)
        return result

    def translate(self, value: Any) -> Any:
        """Rewrite ``value`` through the translator table, if any."""
        if not self.translator:
            return value
        try:
            if value in self.translator:
                return self.translator[value]
        except TypeError:
            # unhashable values cannot be looked up
            return value
        key = str(value)
        if key in self.translator:
            return self.translator[key]
        return value


def parse_mapping_config(
    mapping: Mapping[str, FieldRule | Mapping[str, Any]],
) -> dict[str, FieldRule]:
    """Convert a raw mapping configuration into FieldRule objects."""
    return {str(key): FieldRule.from_dict(rule) for key, rule in mapping.items()}
