"""QuickBooks Online invoice helpers for the receivables board.

Fills the receivables column configuration from a QBO invoice, validates
invoices before sync, and provides a default dynamic mapping for
MondayDynamicMapper.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from qbo_monday import __version__
from qbo_monday.integrations.monday.mapper import build_column_values

logger = logging.getLogger(__name__)

RECEIVABLES_KEY = "receivables_columns"
LEGACY_RECEIVABLES_KEY = "recevales_columns"
RECEIVABLE_TYPE = "Recevable"

DEFAULT_STATUS_LABEL = "Fetched"
DEFAULT_BALANCE_LABELS = {
    "to_pay": "To Pay",
    "partial": "Partial",
    "paid": "Paid",
}

REQUIRED_INVOICE_FIELDS = ("Id", "DocNumber", "TxnDate", "CustomerRef", "TotalAmt")


DEFAULT_INVOICE_MAPPING: dict[str, dict[str, Any]] = {
    "bill_id": {"remote_key": "Id"},
    "bill_number": {"remote_key": "DocNumber"},
    "date": {"remote_key": "TxnDate"},
    "date_due": {"remote_key": "DueDate"},
    "qbo_customer_id": {"remote_key": "CustomerRef.value"},
    "organisation_text": {"remote_key": "CustomerRef.name"},
    "customer_email": {"remote_key": "BillEmail.Address"},
    "total": {"remote_key": "TotalAmt"},
    "balance": {"remote_key": "Balance"},
    "tax": {"remote_key": "TxnTaxDetail.TotalTax"},
    "currency": {"remote_key": "CurrencyRef.value"},
    "terme_id": {"remote_key": "SalesTermRef.value"},
    "type": {"in_remote": False, "value": RECEIVABLE_TYPE},
}


def get_default_invoice_mapping() -> dict[str, dict[str, Any]]:
    """Get the default dynamic mapping for QBO invoices."""
    return copy.deepcopy(DEFAULT_INVOICE_MAPPING)


@dataclass
class InvoiceValidation:
    """Result of validate_qbo_invoice."""

    is_valid: bool
    missing_fields: list[str] = field(default_factory=list)


def validate_qbo_invoice(invoice: Mapping[str, Any]) -> InvoiceValidation:
    """Check that an invoice carries the fields the receivables board needs."""
    missing: list[str] = []
    for name in REQUIRED_INVOICE_FIELDS:
        if name == "CustomerRef":
            customer = invoice.get("CustomerRef") or {}
            if not customer.get("value"):
                missing.append("CustomerRef.value")
        elif not invoice.get(name):
            missing.append(name)
    return InvoiceValidation(is_valid=not missing, missing_fields=missing)


def extract_customer_email(invoice: Mapping[str, Any]) -> str:
    """Customer email carried on the invoice, or an empty string.

    Invoices rarely embed it; a customer query is usually needed.
    """
    customer = invoice.get("CustomerRef") or {}
    return customer.get("email") or ""


def format_date_for_monday(value: str | None) -> str:
    """Normalize a QBO date to ``YYYY-MM-DD``.

    Empty input gives an empty string; unparseable input is returned as is.
    """
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        return value


def _balance_label(balance: float, total: float, labels: Mapping[str, str]) -> str:
    if balance <= 0:
        return labels.get("paid") or DEFAULT_BALANCE_LABELS["paid"]
    if balance < total:
        return labels.get("partial") or DEFAULT_BALANCE_LABELS["partial"]
    return labels.get("to_pay") or DEFAULT_BALANCE_LABELS["to_pay"]


def organise_qbo_invoice(settings: Mapping[str, Any], invoice: Mapping[str, Any]) -> dict[str, Any]:
    """Fill the receivables column values of ``settings`` from a QBO invoice.

    Args:
        settings: Configuration holding ``receivables_columns`` (column key ->
            ``{"monday_id", "type", "value", ...}``) and optional
            ``status_receivables_labels`` / ``status_balance_labels``.
        invoice: QBO invoice as returned by the accounting API.

    Returns:
        A deep copy of ``settings`` with the column values set. Columns
        absent from the configuration are left out.
    """
    logger.debug("organise_qbo_invoice version %s", __version__)
    result = copy.deepcopy(dict(settings))

    columns_key = RECEIVABLES_KEY if RECEIVABLES_KEY in result else LEGACY_RECEIVABLES_KEY
    columns = result.get(columns_key)
    if not columns:
        logger.warning("Settings carry no receivables columns, invoice %s not mapped", invoice.get("Id"))
        return result

    customer = invoice.get("CustomerRef") or {}
    total = invoice.get("TotalAmt") or 0
    balance = invoice.get("Balance") or 0
    total_tax = (invoice.get("TxnTaxDetail") or {}).get("TotalTax") or 0

    status_labels = (
        result.get("status_receivables_labels") or result.get("status_recevales_labels") or {}
    )
    balance_labels = result.get("status_balance_labels") or {}

    values: dict[str, Any] = {
        "bill_id": invoice.get("Id") or "",
        "bill_number": invoice.get("DocNumber") or "",
        "date": invoice.get("TxnDate") or "",
        "date_due": invoice.get("DueDate") or "",
        "qbo_customer_id": customer.get("value") or "",
        "organisation_text": customer.get("name") or "",
        "sub_total": total - total_tax,
        "total": total,
        "balance": balance,
        "organisation": "",
        "provenance": "",
        "status": status_labels.get("fetched") or DEFAULT_STATUS_LABEL,
        "status_balance": _balance_label(balance, total, balance_labels),
        "type": RECEIVABLE_TYPE,
    }
    term_id = (invoice.get("SalesTermRef") or {}).get("value")
    if term_id:
        values["terme_id"] = term_id

    for key, value in values.items():
        column = columns.get(key)
        if column is None:
            logger.debug("Receivables column '%s' not configured", key)
            continue
        column["value"] = value

    return result


def invoice_column_values(settings: Mapping[str, Any], invoice: Mapping[str, Any]) -> dict[str, Any]:
    """Organise an invoice and build the column_values payload for it."""
    organised = organise_qbo_invoice(settings, invoice)
    columns = organised.get(RECEIVABLES_KEY) or organised.get(LEGACY_RECEIVABLES_KEY) or {}
    return build_column_values(columns)
