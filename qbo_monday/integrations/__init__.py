"""Integrations with QuickBooks Online and Monday.com."""
