"""Shared test fixtures for the qbo-monday test suite.

Provides test settings and an in-memory Monday gateway that records
every call made to it.
"""

from __future__ import annotations

from typing import Any

import pytest

from qbo_monday.core.config import Settings
from qbo_monday.integrations.monday.models import ColumnDescriptor


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings that never touch the real API."""
    return Settings(
        monday_api_url="https://monday.test/v2",
        monday_api_token="test-token",  # type: ignore[arg-type]
        monday_api_version="2024-10",
        monday_timeout_seconds=5.0,
        monday_retry_max_attempts=2,
        monday_retry_delays=[0.0],
        _env_file=None,  # type: ignore[call-arg]
    )


class FakeMondayGateway:
    """In-memory stand-in for MondayApiClient.

    Boards are given as board id -> list of ColumnDescriptor. Every call is
    appended to ``calls`` as ``(method_name, args)``.
    """

    def __init__(
        self,
        boards: dict[str, list[ColumnDescriptor]] | None = None,
        *,
        fail_with: Exception | None = None,
    ) -> None:
        self.boards = boards or {}
        self.fail_with = fail_with
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def method_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def fetch_board_columns(self, board_id: str | int) -> list[ColumnDescriptor]:
        self.calls.append(("fetch_board_columns", (board_id,)))
        return list(self.boards.get(str(board_id), []))

    async def create_item(
        self,
        board_id: str | int,
        name: str,
        column_values: dict[str, Any],
        create_labels_if_missing: bool = True,
    ) -> dict[str, Any]:
        self.calls.append(("create_item", (board_id, name, column_values)))
        if self.fail_with is not None:
            raise self.fail_with
        return {"id": "9001", "name": name}

    async def update_item(
        self,
        item_id: str | int,
        board_id: str | int,
        column_values: dict[str, Any],
        create_labels_if_missing: bool = True,
    ) -> dict[str, Any]:
        self.calls.append(("update_item", (item_id, board_id, column_values)))
        if self.fail_with is not None:
            raise self.fail_with
        return {"id": str(item_id), "name": "existing"}


@pytest.fixture
def receivables_columns() -> list[ColumnDescriptor]:
    """Columns of a receivables board with tagged descriptions."""
    return [
        ColumnDescriptor(id="text_client", title="Client ID", type="text", description="{{{client_id}}}"),
        ColumnDescriptor(id="email_1", title="Email", type="email", description="Contact {email}"),
        ColumnDescriptor(id="numbers_total", title="Total", type="numbers", description="{{total}}"),
        ColumnDescriptor(id="date_4", title="Date", type="date", description="Invoice date {date}"),
        ColumnDescriptor(id="status", title="Status", type="status", description="{status}"),
        ColumnDescriptor(id="mirror_1", title="Mirror", type="mirror", description=""),
    ]


@pytest.fixture
def fake_gateway(receivables_columns: list[ColumnDescriptor]) -> FakeMondayGateway:
    return FakeMondayGateway({"123": receivables_columns})


@pytest.fixture
def gateway_factory() -> type[FakeMondayGateway]:
    """The FakeMondayGateway class, for tests that need custom boards or failures."""
    return FakeMondayGateway
