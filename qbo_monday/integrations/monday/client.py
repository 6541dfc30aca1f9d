"""Monday.com GraphQL API client.

Sends queries and mutations to the Monday.com v2 endpoint and turns every
failure mode into one of the exceptions in
:mod:`qbo_monday.integrations.monday.errors`. On top of ``execute`` it
exposes the board-schema and item-mutation operations the mapper needs.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from qbo_monday.integrations.monday.errors import (
    HttpError,
    RemoteGraphError,
    ResponseParseError,
    TransportError,
)
from qbo_monday.integrations.monday.models import ColumnDescriptor
from qbo_monday.integrations.monday.retry import DEFAULT_RETRY_POLICY, RetryPolicy, run_with_retry

if TYPE_CHECKING:
    from qbo_monday.core.config import Settings

logger = logging.getLogger(__name__)

MONDAY_API_URL = "https://api.monday.com/v2"
DEFAULT_API_VERSION = "2024-10"
DEFAULT_TIMEOUT = 30.0

BOARD_COLUMNS_QUERY = """
query ($boardId: [ID!]) {
  boards(ids: $boardId) {
    id
    columns {
      id
      title
      type
      description
      settings_str
    }
  }
}
"""

CREATE_ITEM_MUTATION = """
mutation ($boardId: ID!, $itemName: String!, $columnValues: JSON, $createLabels: Boolean) {
  create_item(
    board_id: $boardId,
    item_name: $itemName,
    column_values: $columnValues,
    create_labels_if_missing: $createLabels
  ) {
    id
    name
  }
}
"""

UPDATE_ITEM_MUTATION = """
mutation ($itemId: ID!, $boardId: ID!, $columnValues: JSON!, $createLabels: Boolean) {
  change_multiple_column_values(
    item_id: $itemId,
    board_id: $boardId,
    column_values: $columnValues,
    create_labels_if_missing: $createLabels
  ) {
    id
    name
  }
}
"""


class MondayApiClient:
    """Client for the Monday.com GraphQL API.

    Args:
        api_token: Token sent verbatim in the Authorization header.
        api_url: GraphQL endpoint.
        api_version: Value of the API-Version header.
        timeout: Transport timeout in seconds.
        retry_policy: Applied to every call; defaults to one retry after 30 s.
        http_client: Optional shared AsyncClient. When omitted a client is
            opened per call.
    """

    def __init__(
        self,
        api_token: str,
        *,
        api_url: str = MONDAY_API_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_token = api_token
        self._api_url = api_url
        self._api_version = api_version
        self._timeout = timeout
        self._retry_policy = retry_policy
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> MondayApiClient:
        """Build a client from application settings, including its retry policy."""
        return cls(
            settings.monday_api_token.get_secret_value(),
            api_url=settings.monday_api_url,
            api_version=settings.monday_api_version,
            timeout=settings.monday_timeout_seconds,
            retry_policy=RetryPolicy.from_settings(settings),
            http_client=http_client,
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": self._api_token,
            "API-Version": self._api_version,
            "Content-Type": "application/json",
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        try:
            if self._http_client is not None:
                return await self._http_client.post(self._api_url, json=payload, headers=self._headers())
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.post(self._api_url, json=payload, headers=self._headers())
        except httpx.RequestError as e:
            raise TransportError(f"Monday API request failed: {e}", cause=e) from e

    async def _execute_once(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._post(payload)

        if not response.is_success:
            raise HttpError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseParseError(f"Monday API returned invalid JSON: {e}") from e
        if not isinstance(body, dict):
            raise ResponseParseError("Monday API returned a non-object JSON body")

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            logger.warning("Monday GraphQL errors: %s", errors)
            raise RemoteGraphError(errors, body.get("data"))

        # Older envelope used for complexity and rate-limit rejections
        if body.get("error_message") or body.get("error_code"):
            error = {
                "message": body.get("error_message") or str(body.get("error_code")),
                "extensions": {"code": body.get("error_code")},
            }
            logger.warning("Monday API error: %s", error["message"])
            raise RemoteGraphError([error], body.get("data"))

        return body

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a GraphQL query or mutation and return the decoded response.

        Args:
            query: GraphQL document.
            variables: Optional variables for the document.

        Returns:
            The full JSON body (``data`` and optional ``extensions``).

        Raises:
            TransportError: The network call could not complete.
            HttpError: The API answered with a non-2xx status.
            ResponseParseError: The body is not a JSON object.
            RemoteGraphError: The body contains an error list.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        return await run_with_retry(
            lambda: self._execute_once(payload),
            self._retry_policy,
            description="Monday GraphQL call",
        )

    async def fetch_board_columns(self, board_id: str | int) -> list[ColumnDescriptor]:
        """Return the columns of a board, in board order.

        An unknown board or a board without columns yields an empty list.
        """
        result = await self.execute(BOARD_COLUMNS_QUERY, {"boardId": [str(board_id)]})
        boards = (result.get("data") or {}).get("boards") or []
        if not boards:
            logger.info("Board %s not found or not accessible", board_id)
            return []
        columns = boards[0].get("columns") or []
        return [ColumnDescriptor.from_api(column) for column in columns]

    async def create_item(
        self,
        board_id: str | int,
        name: str,
        column_values: dict[str, Any],
        create_labels_if_missing: bool = True,
    ) -> dict[str, Any]:
        """Create an item on a board.

        Returns:
            ``{"id": ..., "name": ...}`` of the created item.
        """
        result = await self.execute(
            CREATE_ITEM_MUTATION,
            {
                "boardId": str(board_id),
                "itemName": name,
                "columnValues": json.dumps(column_values),
                "createLabels": create_labels_if_missing,
            },
        )
        return _mutation_result(result, "create_item")

    async def update_item(
        self,
        item_id: str | int,
        board_id: str | int,
        column_values: dict[str, Any],
        create_labels_if_missing: bool = True,
    ) -> dict[str, Any]:
        """Change several column values of an existing item at once.

        Returns:
            ``{"id": ..., "name": ...}`` of the updated item.
        """
        result = await self.execute(
            UPDATE_ITEM_MUTATION,
            {
                "itemId": str(item_id),
                "boardId": str(board_id),
                "columnValues": json.dumps(column_values),
                "createLabels": create_labels_if_missing,
            },
        )
        return _mutation_result(result, "change_multiple_column_values")


def _mutation_result(result: dict[str, Any], field_name: str) -> dict[str, Any]:
    item = (result.get("data") or {}).get(field_name)
    if not isinstance(item, dict) or "id" not in item:
        raise ResponseParseError(f"Monday API response is missing '{field_name}'")
    return {"id": item["id"], "name": item.get("name")}
