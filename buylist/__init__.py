"""Card Buylist — price list / image reconciliation pipeline."""

__version__ = "0.1.0"
