"""
Data loading and saving functions for CSV/Parquet files.

Handles ingestion of transaction histories and quote snapshots, as well
as output of transactions, computed holdings and portfolio summaries.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from stockboard.data.ingest import (
    QuoteParseError,
    TransactionValidationError,
    parse_quote,
    validate_transaction,
)
from stockboard.data.schemas import (
    FileSchema,
    HOLDINGS_SCHEMA,
    QUOTES_SCHEMA,
    SUMMARY_SCHEMA,
    TRANSACTIONS_SCHEMA,
)
from stockboard.models import PortfolioHoldings, Quote, Transaction


class DataLoadError(Exception):
    """Raised when data cannot be loaded or is invalid."""
    pass


def load_transactions(
    file_path: str | Path,
    portfolio_id: Optional[str] = None,
) -> list[Transaction]:
    """
    Load a transaction history from CSV file.

    Args:
        file_path: Path to CSV file with columns: symbol, quantity, price,
                   type, timestamp (optional: transaction_id, portfolio_id)
        portfolio_id: If provided and the file has a portfolio_id column,
                      keep only that portfolio's rows

    Returns:
        List of Transaction objects in file order

    Raises:
        DataLoadError: If the file cannot be loaded or a row is invalid
    """
    file_path = Path(file_path)
    records = _load_records(file_path, TRANSACTIONS_SCHEMA)

    transactions = []
    for row_num, record in enumerate(records, start=1):
        row_portfolio = record.get("portfolio_id")
        if portfolio_id and row_portfolio and row_portfolio != portfolio_id:
            continue

        try:
            txn = validate_transaction(record, portfolio_id=row_portfolio or portfolio_id)
        except TransactionValidationError as e:
            raise DataLoadError(f"{file_path} row {row_num}: {e}")

        if record.get("transaction_id"):
            txn = replace(txn, transaction_id=str(record["transaction_id"]))
        transactions.append(txn)

    return transactions


def load_quotes(
    file_path: str | Path,
    symbols: Optional[list[str]] = None,
) -> dict[str, Quote]:
    """
    Load a quote snapshot from CSV file.

    Args:
        file_path: Path to CSV file with columns: symbol, price (optional: change)
        symbols: Optional list of symbols to filter to

    Returns:
        Dictionary mapping symbol -> Quote

    Raises:
        DataLoadError: If the file cannot be loaded or a value is not numeric
    """
    file_path = Path(file_path)
    records = _load_records(file_path, QUOTES_SCHEMA)

    wanted = {s.upper().strip() for s in symbols} if symbols else None

    quotes = {}
    for record in records:
        symbol = str(record["symbol"]).upper().strip()
        if wanted is not None and symbol not in wanted:
            continue
        try:
            quotes[symbol] = parse_quote(symbol, record)
        except QuoteParseError as e:
            raise DataLoadError(f"{file_path}: {e}")

    return quotes


def save_transactions(
    transactions: list[Transaction],
    output_path: str | Path,
) -> Path:
    """
    Save transactions to CSV file.

    Quantities and prices are written as exact decimal strings.

    Args:
        transactions: List of Transaction objects to save
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = []
    for txn in transactions:
        records.append({
            "transaction_id": txn.transaction_id,
            "portfolio_id": txn.portfolio_id or "",
            "symbol": txn.symbol,
            "quantity": str(txn.quantity),
            "price": str(txn.price),
            "type": txn.type.value,
            "timestamp": txn.timestamp.isoformat(),
        })

    df = pd.DataFrame(records, columns=[
        "transaction_id", "portfolio_id", "symbol", "quantity", "price", "type", "timestamp",
    ])
    df.to_csv(output_path, index=False)

    return output_path


def save_holdings(
    result: PortfolioHoldings,
    output_path: str | Path,
) -> Path:
    """
    Save computed holdings to CSV file.

    Args:
        result: Holdings and summary for a portfolio
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    records = []
    for holding in result.holdings:
        records.append({
            "symbol": holding.symbol,
            "shares": float(holding.shares),
            "avg_cost": float(holding.avg_cost),
            "current_price": float(holding.current_price),
            "value": float(holding.value),
            "weight": float(holding.weight),
            "return_amount": float(holding.return_amount),
            "return_percent": float(holding.return_percent),
        })

    df = pd.DataFrame(records, columns=HOLDINGS_SCHEMA.all_columns)
    df.to_csv(output_path, index=False)

    return output_path


def save_summary(
    result: PortfolioHoldings,
    output_path: str | Path,
    portfolio_id: str,
) -> Path:
    """
    Save a portfolio summary to CSV file as a single row.

    Money and percent values are written as exact decimal strings.

    Args:
        result: Holdings and summary for a portfolio
        output_path: Path for output CSV file
        portfolio_id: Portfolio the summary belongs to

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    summary = result.summary
    record = {
        "portfolio_id": portfolio_id,
        "total_value": str(summary.total_value),
        "initial_investment": str(summary.initial_investment),
        "all_time_return": str(summary.all_time_return),
        "all_time_return_percent": str(summary.all_time_return_percent),
        "daily_change": str(summary.daily_change),
        "daily_change_percent": str(summary.daily_change_percent),
        "num_holdings": len(result.holdings),
    }

    df = pd.DataFrame([record], columns=SUMMARY_SCHEMA.all_columns)
    df.to_csv(output_path, index=False)

    return output_path


def _load_records(file_path: Path, schema: FileSchema) -> list[dict[str, Any]]:
    """
    Load a CSV or Parquet file as row dictionaries, validated against schema.

    CSV cells are read as strings so decimal values keep their exact
    text; empty cells become None. An empty cell in a column the schema
    marks non-nullable is an error.

    Args:
        file_path: Path to the file
        schema: Expected file schema

    Returns:
        List of row dictionaries

    Raises:
        DataLoadError: If file cannot be loaded, has missing columns or
                       a required value is empty
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    # Support both CSV and Parquet
    if file_path.suffix.lower() == ".parquet":
        try:
            df = pd.read_parquet(file_path)
        except Exception as e:
            raise DataLoadError(f"Failed to load parquet file {file_path}: {e}")
    else:
        try:
            df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        except Exception as e:
            raise DataLoadError(f"Failed to load CSV file {file_path}: {e}")

    # Validate columns
    is_valid, missing = schema.validate_columns(df.columns.tolist())
    if not is_valid:
        raise DataLoadError(
            f"File {file_path} is missing required columns: {missing}"
        )

    df = df.astype(object).where(df.notna(), None)
    records = df.to_dict(orient="records")
    for record in records:
        for key, value in record.items():
            if isinstance(value, str) and not value.strip():
                record[key] = None

    checked = [c for c in schema.non_nullable_columns if c in df.columns]
    for row_num, record in enumerate(records, start=1):
        for column in checked:
            if record[column] is None:
                raise DataLoadError(
                    f"{file_path} row {row_num}: missing value for required column '{column}'"
                )

    return records
