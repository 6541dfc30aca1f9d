"""QuickBooks Online to Monday.com integration utilities."""

__version__ = "1.0.6"
