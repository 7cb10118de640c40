"""
Portfolio module for the stockboard portfolio dashboard.

Provides holdings aggregation from transaction histories, portfolio
valuation against live quotes, and trade recording.
"""

from stockboard.portfolio.holdings import (
    calculate_position,
    calculate_position_weights,
    get_top_movers,
    get_tracked_symbols,
    group_transactions_by_symbol,
)
from stockboard.portfolio.valuation import (
    compute_all_holdings,
    compute_holdings,
    compute_portfolio,
    summarize_portfolio,
)
from stockboard.portfolio.transactions import (
    ensure_tracked,
    record_transaction,
)

__all__ = [
    "calculate_position",
    "calculate_position_weights",
    "get_top_movers",
    "get_tracked_symbols",
    "group_transactions_by_symbol",
    "compute_all_holdings",
    "compute_holdings",
    "compute_portfolio",
    "summarize_portfolio",
    "ensure_tracked",
    "record_transaction",
]
