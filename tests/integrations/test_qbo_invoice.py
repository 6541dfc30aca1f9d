"""Tests for the QBO invoice helpers (qbo_monday.integrations.qbo.invoice)."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from qbo_monday.integrations.qbo.invoice import (
    DEFAULT_INVOICE_MAPPING,
    extract_customer_email,
    format_date_for_monday,
    get_default_invoice_mapping,
    invoice_column_values,
    organise_qbo_invoice,
    validate_qbo_invoice,
)

INVOICE: dict[str, Any] = {
    "Id": "130",
    "DocNumber": "1037",
    "TxnDate": "2024-02-01",
    "DueDate": "2024-03-02",
    "CustomerRef": {"value": "58", "name": "Acme Corp"},
    "TotalAmt": 115.0,
    "Balance": 115.0,
    "TxnTaxDetail": {"TotalTax": 15.0},
    "SalesTermRef": {"value": "4"},
}

COLUMN_KEYS = (
    "bill_id",
    "bill_number",
    "date",
    "date_due",
    "qbo_customer_id",
    "organisation_text",
    "sub_total",
    "total",
    "balance",
    "organisation",
    "provenance",
    "status",
    "status_balance",
    "terme_id",
    "type",
)


@pytest.fixture
def qbo_settings() -> dict[str, Any]:
    columns = {key: {"monday_id": "", "type": "text", "value": None} for key in COLUMN_KEYS}
    columns["total"].update(monday_id="numbers_total", type="numbers")
    columns["sub_total"].update(monday_id="numbers_sub", type="numbers")
    columns["status_balance"].update(monday_id="status_balance", type="status")
    columns["date"].update(monday_id="date_4", type="date")
    columns["organisation"].update(monday_id="connect_org", type="board_relation")
    return {
        "receivables_columns": columns,
        "status_balance_labels": {"paid": "Payée", "partial": "Partielle", "to_pay": "À payer"},
    }


# =============================================================================
# organise_qbo_invoice
# =============================================================================


class TestOrganiseQboInvoice:
    def test_fills_column_values(self, qbo_settings) -> None:
        result = organise_qbo_invoice(qbo_settings, INVOICE)
        columns = result["receivables_columns"]

        assert columns["bill_id"]["value"] == "130"
        assert columns["bill_number"]["value"] == "1037"
        assert columns["date"]["value"] == "2024-02-01"
        assert columns["date_due"]["value"] == "2024-03-02"
        assert columns["qbo_customer_id"]["value"] == "58"
        assert columns["organisation_text"]["value"] == "Acme Corp"
        assert columns["sub_total"]["value"] == 100.0
        assert columns["total"]["value"] == 115.0
        assert columns["balance"]["value"] == 115.0
        assert columns["organisation"]["value"] == ""
        assert columns["status"]["value"] == "Fetched"
        assert columns["terme_id"]["value"] == "4"
        assert columns["type"]["value"] == "Recevable"

    def test_does_not_mutate_settings(self, qbo_settings) -> None:
        before = copy.deepcopy(qbo_settings)
        organise_qbo_invoice(qbo_settings, INVOICE)
        assert qbo_settings == before

    @pytest.mark.parametrize(
        ("balance", "expected"),
        [(115.0, "À payer"), (40.0, "Partielle"), (0, "Payée"), (-5.0, "Payée")],
    )
    def test_balance_status(self, qbo_settings, balance: float, expected: str) -> None:
        invoice = {**INVOICE, "Balance": balance}
        result = organise_qbo_invoice(qbo_settings, invoice)
        assert result["receivables_columns"]["status_balance"]["value"] == expected

    def test_default_labels(self, qbo_settings) -> None:
        del qbo_settings["status_balance_labels"]
        qbo_settings["status_receivables_labels"] = {"fetched": "Importée"}
        result = organise_qbo_invoice(qbo_settings, {**INVOICE, "Balance": 50.0})

        assert result["receivables_columns"]["status_balance"]["value"] == "Partial"
        assert result["receivables_columns"]["status"]["value"] == "Importée"

    def test_missing_term_keeps_configured_value(self, qbo_settings) -> None:
        qbo_settings["receivables_columns"]["terme_id"]["value"] = "1"
        invoice = {k: v for k, v in INVOICE.items() if k != "SalesTermRef"}
        result = organise_qbo_invoice(qbo_settings, invoice)
        assert result["receivables_columns"]["terme_id"]["value"] == "1"

    def test_legacy_settings_key(self) -> None:
        settings = {"recevales_columns": {"bill_id": {"value": None}}}
        result = organise_qbo_invoice(settings, INVOICE)
        assert result["recevales_columns"]["bill_id"]["value"] == "130"

    def test_unconfigured_columns_are_skipped(self) -> None:
        result = organise_qbo_invoice({"receivables_columns": {"total": {"value": None}}}, INVOICE)
        assert result["receivables_columns"] == {"total": {"value": 115.0}}

    def test_settings_without_columns(self) -> None:
        assert organise_qbo_invoice({"other": 1}, INVOICE) == {"other": 1}


class TestInvoiceColumnValues:
    def test_builds_payload_from_configured_columns(self, qbo_settings) -> None:
        payload = invoice_column_values(qbo_settings, INVOICE)
        assert payload == {
            "numbers_total": 115.0,
            "numbers_sub": 100.0,
            "status_balance": {"label": "À payer"},
            "date_4": {"date": "2024-02-01"},
        }


# =============================================================================
# Validation and helpers
# =============================================================================


class TestValidateQboInvoice:
    def test_valid_invoice(self) -> None:
        result = validate_qbo_invoice(INVOICE)
        assert result.is_valid is True
        assert result.missing_fields == []

    def test_missing_fields(self) -> None:
        result = validate_qbo_invoice({"Id": "1", "CustomerRef": {"name": "No id"}})
        assert result.is_valid is False
        assert result.missing_fields == ["DocNumber", "TxnDate", "CustomerRef.value", "TotalAmt"]


class TestHelpers:
    def test_extract_customer_email(self) -> None:
        assert extract_customer_email({"CustomerRef": {"email": "a@b.co"}}) == "a@b.co"
        assert extract_customer_email(INVOICE) == ""
        assert extract_customer_email({}) == ""

    def test_format_date_for_monday(self) -> None:
        assert format_date_for_monday("2024-02-01") == "2024-02-01"
        assert format_date_for_monday("2024-02-01T08:00:00-05:00") == "2024-02-01"
        assert format_date_for_monday("") == ""
        assert format_date_for_monday(None) == ""
        assert format_date_for_monday("someday") == "someday"

    def test_default_mapping_is_a_copy(self) -> None:
        mapping = get_default_invoice_mapping()
        mapping["bill_id"]["remote_key"] = "Changed"
        assert DEFAULT_INVOICE_MAPPING["bill_id"]["remote_key"] == "Id"

    def test_default_mapping_paths(self) -> None:
        mapping = get_default_invoice_mapping()
        assert mapping["qbo_customer_id"]["remote_key"] == "CustomerRef.value"
        assert mapping["type"] == {"in_remote": False, "value": "Recevable"}
