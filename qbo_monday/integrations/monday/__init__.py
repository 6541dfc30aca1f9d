"""Monday.com API client, column sanitizers and dynamic mapping engine."""

from qbo_monday.integrations.monday.client import MondayApiClient
from qbo_monday.integrations.monday.error_log import ErrorLogRecord, log_error
from qbo_monday.integrations.monday.errors import (
    HttpError,
    MondayError,
    RemoteGraphError,
    ResponseParseError,
    TransportError,
)
from qbo_monday.integrations.monday.mapper import MondayDynamicMapper, build_column_values
from qbo_monday.integrations.monday.models import ColumnDescriptor, ColumnType, FieldRule
from qbo_monday.integrations.monday.retry import RetryPolicy, is_retryable_error
from qbo_monday.integrations.monday.sanitizers import sanitize_value_for_column_type
from qbo_monday.integrations.monday.schema_cache import SchemaCache

__all__ = [
    "ColumnDescriptor",
    "ColumnType",
    "ErrorLogRecord",
    "FieldRule",
    "HttpError",
    "MondayApiClient",
    "MondayDynamicMapper",
    "MondayError",
    "RemoteGraphError",
    "ResponseParseError",
    "RetryPolicy",
    "SchemaCache",
    "TransportError",
    "build_column_values",
    "is_retryable_error",
    "log_error",
    "sanitize_value_for_column_type",
]
