"""Service-ticket spreadsheet reconciliation and pending-ticket export."""

__version__ = "0.1.0"
