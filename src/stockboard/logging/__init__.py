"""
Decision logging module for the stockboard portfolio dashboard.

Provides append-only decision logging for audit and reproducibility.
"""

from stockboard.logging.decision_log import (
    DecisionLogger,
    log_action,
    get_logger,
)

__all__ = [
    "DecisionLogger",
    "log_action",
    "get_logger",
]
