"""
Portfolio valuation from transactions and live quotes.

This module turns a portfolio's tracked symbols, its transaction history
and a quote snapshot into open holdings and a portfolio summary. Every
function here is pure: inputs are already fetched, nothing is persisted,
and missing quotes degrade to zero rather than raising.
"""

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from stockboard.models import (
    Holding,
    PortfolioConfig,
    PortfolioHoldings,
    PortfolioStock,
    PortfolioSummary,
    Quote,
    Transaction,
)
from stockboard.portfolio.holdings import (
    ZERO,
    apply_weights,
    build_holding,
    calculate_position,
    get_tracked_symbols,
    group_transactions_by_symbol,
    percent_of,
)

logger = logging.getLogger(__name__)


def _quote_for(quotes: Mapping[str, Quote], symbol: str) -> Quote:
    return quotes.get(symbol) or Quote(symbol=symbol)


def compute_holdings(
    stocks: Iterable[PortfolioStock],
    transactions: Iterable[Transaction],
    quotes: Mapping[str, Quote],
    initial_investment: Optional[Decimal] = None,
) -> PortfolioHoldings:
    """
    Compute open holdings and the portfolio summary.

    Only symbols the portfolio tracks are considered. A symbol whose net
    shares are zero or negative produces no holding.

    Args:
        stocks: Symbols the portfolio tracks
        transactions: Full transaction history, any order
        quotes: Current quotes by symbol; missing entries count as price 0
        initial_investment: Declared baseline, or None to use cost basis

    Returns:
        PortfolioHoldings sorted by market value descending
    """
    grouped = group_transactions_by_symbol(transactions)
    symbols = get_tracked_symbols(stocks)

    untracked = set(grouped) - set(symbols)
    if untracked:
        logger.debug("Ignoring transactions for untracked symbols: %s", sorted(untracked))

    holdings: list[Holding] = []
    for symbol in symbols:
        position = calculate_position(symbol, grouped.get(symbol, []))
        holding = build_holding(position, _quote_for(quotes, symbol).price)
        if holding is not None:
            holdings.append(holding)

    total_value = sum((h.value for h in holdings), ZERO)
    apply_weights(holdings, total_value)
    holdings.sort(key=lambda h: (-h.value, h.symbol))

    summary = summarize_portfolio(holdings, quotes, initial_investment)
    return PortfolioHoldings(holdings=holdings, summary=summary)


def calculate_daily_change(
    holdings: Iterable[Holding],
    quotes: Mapping[str, Quote],
) -> Decimal:
    """
    Sum each holding's shares times its per-share change since prior close.

    Holdings without a quote contribute nothing.
    """
    return sum(
        (h.shares * _quote_for(quotes, h.symbol).change_from_prior_close for h in holdings),
        ZERO,
    )


def summarize_portfolio(
    holdings: list[Holding],
    quotes: Mapping[str, Quote],
    initial_investment: Optional[Decimal] = None,
) -> PortfolioSummary:
    """
    Roll holdings up into portfolio-level metrics.

    When no initial investment is declared, the cost basis of the open
    holdings stands in for it. When nothing is held but an initial
    investment is declared, the portfolio is valued at that amount, i.e.
    as uninvested cash with no return.

    Args:
        holdings: Valued holdings
        quotes: Current quotes by symbol
        initial_investment: Declared baseline, or None

    Returns:
        PortfolioSummary with all percentages in percent
    """
    total_value = sum((h.value for h in holdings), ZERO)

    if initial_investment is None:
        initial_investment = sum((h.cost_basis for h in holdings), ZERO)
    elif not holdings:
        total_value = initial_investment

    daily_change = calculate_daily_change(holdings, quotes)
    all_time_return = total_value - initial_investment

    return PortfolioSummary(
        total_value=total_value,
        initial_investment=initial_investment,
        all_time_return=all_time_return,
        all_time_return_percent=percent_of(all_time_return, initial_investment),
        daily_change=daily_change,
        daily_change_percent=percent_of(daily_change, total_value),
    )


def compute_portfolio(
    portfolio: PortfolioConfig,
    transactions: Iterable[Transaction],
    quotes: Mapping[str, Quote],
) -> PortfolioHoldings:
    """Compute holdings for a configured portfolio."""
    return compute_holdings(
        stocks=portfolio.stocks,
        transactions=transactions,
        quotes=quotes,
        initial_investment=portfolio.initial_investment,
    )


def compute_all_holdings(
    portfolios: Iterable[PortfolioConfig],
    transactions_by_portfolio: Mapping[str, list[Transaction]],
    quotes: Mapping[str, Quote],
) -> dict[str, PortfolioHoldings]:
    """
    Compute holdings for several portfolios against one quote snapshot.

    Each portfolio is computed independently; a portfolio without any
    transactions is treated as empty.

    Args:
        portfolios: Portfolio definitions
        transactions_by_portfolio: Transactions keyed by portfolio_id
        quotes: Shared quote snapshot

    Returns:
        Dictionary mapping portfolio_id to its PortfolioHoldings
    """
    return {
        portfolio.portfolio_id: compute_portfolio(
            portfolio,
            transactions_by_portfolio.get(portfolio.portfolio_id, []),
            quotes,
        )
        for portfolio in portfolios
    }
