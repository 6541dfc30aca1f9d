"""QuickBooks Online invoice transformation for Monday.com boards."""

from qbo_monday.integrations.qbo.invoice import (
    DEFAULT_INVOICE_MAPPING,
    InvoiceValidation,
    extract_customer_email,
    format_date_for_monday,
    get_default_invoice_mapping,
    invoice_column_values,
    organise_qbo_invoice,
    validate_qbo_invoice,
)

__all__ = [
    "DEFAULT_INVOICE_MAPPING",
    "InvoiceValidation",
    "extract_customer_email",
    "format_date_for_monday",
    "get_default_invoice_mapping",
    "invoice_column_values",
    "organise_qbo_invoice",
    "validate_qbo_invoice",
]
