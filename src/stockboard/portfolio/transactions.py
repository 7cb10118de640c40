"""
Recording new trades against a portfolio.
"""

from dataclasses import replace
from typing import Any, Mapping
import uuid

from stockboard.data.ingest import validate_transaction
from stockboard.models import PortfolioConfig, PortfolioStock, Transaction


def ensure_tracked(portfolio: PortfolioConfig, symbol: str) -> PortfolioConfig:
    """
    Return the portfolio with symbol in its tracked stocks.

    The input portfolio is not modified; if the symbol is already
    tracked it is returned unchanged.
    """
    symbol = symbol.upper()
    if symbol in portfolio.symbols:
        return portfolio

    stock = PortfolioStock(stock_id=str(uuid.uuid4()), symbol=symbol)
    return replace(portfolio, stocks=[*portfolio.stocks, stock])


def record_transaction(
    portfolio: PortfolioConfig,
    transactions: list[Transaction],
    record: Mapping[str, Any],
) -> tuple[PortfolioConfig, list[Transaction]]:
    """
    Validate a trade entry and add it to the portfolio history.

    Args:
        portfolio: Portfolio receiving the trade
        transactions: Existing transactions for the portfolio
        record: Raw trade record

    Returns:
        Tuple of (portfolio tracking the traded symbol, transactions
        including the new one)

    Raises:
        TransactionValidationError: If the record is invalid
    """
    txn = validate_transaction(record, portfolio_id=portfolio.portfolio_id)
    return ensure_tracked(portfolio, txn.symbol), [*transactions, txn]
