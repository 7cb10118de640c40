"""
Pytest fixtures for the stockboard tests.

Provides common test data and utilities used across test modules.
"""

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from stockboard.models import (
    PortfolioConfig,
    PortfolioStock,
    Quote,
    Transaction,
    TransactionType,
)


def make_txn(
    symbol: str,
    txn_type: TransactionType,
    quantity: str,
    price: str,
    timestamp: datetime = datetime(2024, 1, 2, 10, 0),
    portfolio_id: str = "TEST001",
) -> Transaction:
    """Build a Transaction with a fixed id derived from its fields."""
    return Transaction(
        symbol=symbol,
        quantity=Decimal(quantity),
        price=Decimal(price),
        type=txn_type,
        timestamp=timestamp,
        transaction_id=f"{symbol}-{txn_type.value}-{quantity}-{timestamp:%Y%m%d%H%M}",
        portfolio_id=portfolio_id,
    )


@pytest.fixture
def sample_stocks() -> list[PortfolioStock]:
    """Tracked stocks for the sample portfolio."""
    return [
        PortfolioStock(stock_id="stk-1", symbol="AAPL"),
        PortfolioStock(stock_id="stk-2", symbol="MSFT"),
        PortfolioStock(stock_id="stk-3", symbol="TSLA"),
        PortfolioStock(stock_id="stk-4", symbol="NVDA"),
    ]


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """
    Trade history for the sample portfolio.

    AAPL: 20 bought in two lots, 5 sold -> 15 open
    MSFT: 10 bought -> 10 open
    TSLA: 8 bought, 8 sold -> closed
    NVDA: tracked but never traded
    """
    return [
        make_txn("AAPL", TransactionType.BUY, "10", "150", datetime(2024, 1, 2, 10, 0)),
        make_txn("MSFT", TransactionType.BUY, "10", "300", datetime(2024, 1, 3, 10, 0)),
        make_txn("AAPL", TransactionType.BUY, "10", "170", datetime(2024, 2, 1, 10, 0)),
        make_txn("TSLA", TransactionType.BUY, "8", "250", datetime(2024, 2, 5, 10, 0)),
        make_txn("AAPL", TransactionType.SELL, "5", "180", datetime(2024, 3, 1, 10, 0)),
        make_txn("TSLA", TransactionType.SELL, "8", "200", datetime(2024, 4, 1, 10, 0)),
    ]


@pytest.fixture
def sample_quotes() -> dict[str, Quote]:
    """Quote snapshot for the sample portfolio."""
    return {
        "AAPL": Quote(symbol="AAPL", price=Decimal("200"), change_from_prior_close=Decimal("2")),
        "MSFT": Quote(symbol="MSFT", price=Decimal("280"), change_from_prior_close=Decimal("-1.5")),
        "TSLA": Quote(symbol="TSLA", price=Decimal("190"), change_from_prior_close=Decimal("4")),
    }


@pytest.fixture
def sample_portfolio_config(sample_stocks: list[PortfolioStock]) -> PortfolioConfig:
    """Create a sample portfolio configuration for testing."""
    return PortfolioConfig(
        portfolio_id="TEST001",
        name="Growth",
        description="Sample growth portfolio",
        initial_investment=Decimal("6000"),
        stocks=sample_stocks,
        output_dir="output",
    )


@pytest.fixture
def temp_output_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_file(temp_output_dir: Path):
    """
    Factory fixture for writing text files into the temp directory.

    Usage:
        def test_something(write_file):
            path = write_file("quotes.csv", "symbol,price\\nAAPL,1\\n")
    """
    def _write(name: str, content: str) -> Path:
        path = temp_output_dir / name
        path.write_text(content)
        return path

    return _write
