"""
Core data models for the stockboard portfolio dashboard.

This module defines the fundamental data structures used throughout the system,
including transactions, quotes, derived holdings and portfolio summaries.
All monetary and share quantities use Decimal for precision.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
import uuid


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC.

    Naive values are assumed to already be UTC and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class TransactionType(Enum):
    """Trade direction indicator."""
    BUY = "BUY"
    SELL = "SELL"


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    TRANSACTION_RECORDED = "TRANSACTION_RECORDED"
    HOLDINGS_COMPUTED = "HOLDINGS_COMPUTED"


@dataclass(frozen=True)
class Transaction:
    """
    A single historical trade in a portfolio.

    Transactions are immutable records; holdings are always rebuilt from
    the full list rather than by mutating earlier entries.

    Attributes:
        symbol: Ticker symbol (upper-case)
        quantity: Number of shares traded (> 0)
        price: Per-share execution price (> 0)
        type: BUY or SELL
        timestamp: When the trade happened
        transaction_id: Unique identifier for this transaction
        portfolio_id: Portfolio the trade belongs to
    """
    symbol: str
    quantity: Decimal
    price: Decimal
    type: TransactionType
    timestamp: datetime
    transaction_id: str = ""
    portfolio_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        symbol: str,
        quantity: Decimal,
        price: Decimal,
        type: TransactionType,
        timestamp: Optional[datetime] = None,
        portfolio_id: Optional[str] = None,
    ) -> "Transaction":
        """Factory method to create a Transaction with auto-generated ID."""
        return cls(
            symbol=symbol,
            quantity=quantity,
            price=price,
            type=type,
            timestamp=timestamp or utc_now(),
            transaction_id=str(uuid.uuid4()),
            portfolio_id=portfolio_id,
        )

    @property
    def total_amount(self) -> Decimal:
        """Gross trade amount (quantity * price)."""
        return self.quantity * self.price


@dataclass(frozen=True)
class PortfolioStock:
    """A symbol tracked by a portfolio, which may have no open shares."""
    stock_id: str
    symbol: str


@dataclass(frozen=True)
class Quote:
    """
    Live quote snapshot for a symbol.

    Attributes:
        symbol: Ticker symbol
        price: Latest market price
        change_from_prior_close: Per-share price change versus the prior close
    """
    symbol: str
    price: Decimal = Decimal("0")
    change_from_prior_close: Decimal = Decimal("0")


@dataclass
class PositionTotals:
    """Net share count and buy-side cost basis for one symbol."""
    symbol: str
    shares: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    num_transactions: int = 0


@dataclass
class Holding:
    """
    Point-in-time view of an open position in one symbol.

    Attributes:
        symbol: Ticker symbol
        shares: Net shares held
        avg_cost: Buy-side cost basis divided by net shares
        current_price: Price used for valuation
        value: Market value (shares * current_price)
        weight: Share of total portfolio value, in percent (0-100)
        return_amount: value - shares * avg_cost
        return_percent: return_amount as a percentage of cost
    """
    symbol: str
    shares: Decimal
    avg_cost: Decimal
    current_price: Decimal
    value: Decimal
    weight: Decimal
    return_amount: Decimal
    return_percent: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Total cost of the open shares (shares * avg_cost)."""
        return self.shares * self.avg_cost


@dataclass
class PortfolioSummary:
    """
    Portfolio-level rollup of holdings.

    Percent fields are expressed in percent (e.g. 12.5 for 12.5%).
    """
    total_value: Decimal = Decimal("0")
    initial_investment: Decimal = Decimal("0")
    all_time_return: Decimal = Decimal("0")
    all_time_return_percent: Decimal = Decimal("0")
    daily_change: Decimal = Decimal("0")
    daily_change_percent: Decimal = Decimal("0")


@dataclass
class PortfolioHoldings:
    """Holdings plus summary for a single portfolio."""
    holdings: list[Holding]
    summary: PortfolioSummary

    @property
    def symbols(self) -> list[str]:
        return [h.symbol for h in self.holdings]

    def get(self, symbol: str) -> Optional[Holding]:
        """Return the holding for a symbol, or None if not held."""
        for holding in self.holdings:
            if holding.symbol == symbol.upper():
                return holding
        return None


@dataclass
class PortfolioConfig:
    """
    Portfolio definition loaded from YAML.

    Attributes:
        portfolio_id: Unique portfolio identifier
        name: Display name
        description: Optional free-text description
        initial_investment: Declared baseline; None means derive from cost basis
        stocks: Tracked symbols
        output_dir: Directory for output files
    """
    portfolio_id: str
    name: str = ""
    description: str = ""
    initial_investment: Optional[Decimal] = None
    stocks: list[PortfolioStock] = field(default_factory=list)
    output_dir: str = "output"

    @property
    def symbols(self) -> list[str]:
        return [s.symbol for s in self.stocks]


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        portfolio_id: Portfolio involved (if applicable)
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    portfolio_id: Optional[str]
    details: dict

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        portfolio_id: Optional[str],
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            portfolio_id=portfolio_id,
            details=details,
        )
