"""
Position aggregation for the stockboard portfolio dashboard.

Provides utilities for turning a transaction history into per-symbol
share counts and cost bases, and for weighting and ranking holdings.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from stockboard.models import (
    Holding,
    PortfolioStock,
    PositionTotals,
    Transaction,
    TransactionType,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def percent_of(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Express numerator as a percentage of denominator.

    Returns 0 instead of raising when the denominator is zero.
    """
    if denominator == ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


def group_transactions_by_symbol(
    transactions: Iterable[Transaction],
) -> dict[str, list[Transaction]]:
    """
    Group transactions by symbol.

    Args:
        transactions: Transactions in any order

    Returns:
        Dictionary mapping symbol to its transactions, oldest first
        (aware and naive timestamps are compared as UTC)
    """
    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        grouped[txn.symbol.upper()].append(txn)

    for txns in grouped.values():
        txns.sort(key=lambda t: to_naive_utc(t.timestamp))

    return dict(grouped)


def get_tracked_symbols(stocks: Iterable[PortfolioStock]) -> list[str]:
    """
    Get the unique symbols a portfolio tracks, in first-seen order.

    Args:
        stocks: Tracked portfolio stocks

    Returns:
        List of upper-case symbols without duplicates
    """
    seen: dict[str, None] = {}
    for stock in stocks:
        seen.setdefault(stock.symbol.upper(), None)
    return list(seen)


def calculate_position(
    symbol: str,
    transactions: Iterable[Transaction],
) -> PositionTotals:
    """
    Net out a symbol's transactions into shares and cost basis.

    Buys add shares and cost; sells only remove shares. Sells do not
    reduce the cost basis, so avg_cost after a partial sale is
    total buy cost spread over the remaining shares.

    Args:
        symbol: Symbol to calculate
        transactions: Transactions for the symbol (others are ignored)

    Returns:
        PositionTotals for the symbol; shares may be zero or negative
    """
    totals = PositionTotals(symbol=symbol.upper())

    for txn in transactions:
        if txn.symbol.upper() != totals.symbol:
            continue
        if txn.type == TransactionType.BUY:
            totals.shares += txn.quantity
            totals.total_cost += txn.quantity * txn.price
        elif txn.type == TransactionType.SELL:
            totals.shares -= txn.quantity
        totals.num_transactions += 1

    return totals


def build_holding(
    position: PositionTotals,
    current_price: Decimal,
) -> Optional[Holding]:
    """
    Value an open position at the current price.

    Weight is left at zero; it depends on the whole portfolio and is
    filled in by apply_weights.

    Args:
        position: Net position for a symbol
        current_price: Price to value the position at

    Returns:
        Holding, or None if the position has no open shares
    """
    if position.shares <= ZERO:
        if position.shares < ZERO:
            logger.warning(
                "Sells exceed buys for %s (net shares %s); treating as closed",
                position.symbol,
                position.shares,
            )
        return None

    avg_cost = position.total_cost / position.shares
    cost = position.shares * avg_cost
    value = position.shares * current_price
    return_amount = value - cost

    return Holding(
        symbol=position.symbol,
        shares=position.shares,
        avg_cost=avg_cost,
        current_price=current_price,
        value=value,
        weight=ZERO,
        return_amount=return_amount,
        return_percent=percent_of(return_amount, cost),
    )


def calculate_position_weights(
    holdings: list[Holding],
    total_portfolio_value: Optional[Decimal] = None,
) -> dict[str, Decimal]:
    """
    Calculate current portfolio weights by symbol.

    Args:
        holdings: Valued holdings
        total_portfolio_value: Optional pre-calculated total value

    Returns:
        Dictionary mapping symbol to weight in percent (0-100);
        every weight is 0 when the total value is 0
    """
    if total_portfolio_value is None:
        total_portfolio_value = sum((h.value for h in holdings), ZERO)

    return {
        h.symbol: percent_of(h.value, total_portfolio_value)
        for h in holdings
    }


def apply_weights(
    holdings: list[Holding],
    total_portfolio_value: Optional[Decimal] = None,
) -> list[Holding]:
    """Set each holding's weight in place and return the list."""
    weights = calculate_position_weights(holdings, total_portfolio_value)
    for holding in holdings:
        holding.weight = weights[holding.symbol]
    return holdings


def get_top_movers(
    holdings: list[Holding],
    top_n: int = 5,
) -> tuple[list[Holding], list[Holding]]:
    """
    Get top gainers and losers by return percentage.

    Args:
        holdings: Valued holdings
        top_n: Number of holdings to return on each side

    Returns:
        Tuple of (gainers, losers); gainers are positive returns sorted
        best first, losers are negative returns sorted worst first
    """
    ranked = sorted(holdings, key=lambda h: h.return_percent, reverse=True)

    gainers = [h for h in ranked if h.return_percent > ZERO][:top_n]
    losers = [h for h in reversed(ranked) if h.return_percent < ZERO][:top_n]

    return gainers, losers
