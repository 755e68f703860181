"""General ledger engine: chart of accounts, journal and reports."""

__version__ = "0.1.0"
