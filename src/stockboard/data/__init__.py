"""
Data ingestion module for the stockboard portfolio dashboard.

Provides validation of raw trade and quote records, and loading/saving
of transactions, quotes, holdings and summaries as CSV/Parquet files.
"""

from stockboard.data.ingest import (
    QuoteParseError,
    TransactionValidationError,
    parse_quote,
    parse_quotes,
    validate_transaction,
)
from stockboard.data.loaders import (
    DataLoadError,
    load_quotes,
    load_transactions,
    save_holdings,
    save_summary,
    save_transactions,
)
from stockboard.data.schemas import (
    HOLDINGS_SCHEMA,
    QUOTES_SCHEMA,
    SUMMARY_SCHEMA,
    TRANSACTIONS_SCHEMA,
)

__all__ = [
    "QuoteParseError",
    "TransactionValidationError",
    "parse_quote",
    "parse_quotes",
    "validate_transaction",
    "DataLoadError",
    "load_quotes",
    "load_transactions",
    "save_holdings",
    "save_summary",
    "save_transactions",
    "HOLDINGS_SCHEMA",
    "QUOTES_SCHEMA",
    "SUMMARY_SCHEMA",
    "TRANSACTIONS_SCHEMA",
]
