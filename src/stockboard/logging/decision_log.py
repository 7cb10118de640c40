"""
Append-only decision logging for the stockboard portfolio dashboard.

Loaded configurations, recorded trades and computed holdings are logged
with timestamps to support auditability and reproducibility.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from stockboard.models import (
    ActionType,
    DecisionLogEntry,
    PortfolioConfig,
    PortfolioHoldings,
    Transaction,
)


class DecisionLogger:
    """
    Append-only decision logger.

    Writes all decisions to a JSONL file for audit purposes.
    Each line is a complete JSON object representing one action.
    """

    def __init__(self, log_path: str | Path):
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """
        Write a decision log entry.

        Args:
            entry: DecisionLogEntry to write
        """
        record = {
            "timestamp": entry.timestamp.isoformat(),
            "action_type": entry.action_type.value,
            "portfolio_id": entry.portfolio_id,
            "details": entry.details,
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(record, cls=DecimalEncoder) + "\n")

    def log_config_loaded(
        self,
        config: PortfolioConfig,
        config_path: str,
    ) -> None:
        """
        Log configuration loading.

        Args:
            config: Loaded configuration
            config_path: Path to configuration file
        """
        details = {
            "config_path": config_path,
            "name": config.name,
            "initial_investment": config.initial_investment,
            "symbols": config.symbols,
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.CONFIG_LOADED,
            portfolio_id=config.portfolio_id,
            details=details,
        )
        self.log(entry)

    def log_transaction_recorded(
        self,
        transaction: Transaction,
    ) -> None:
        """Log a newly recorded trade."""
        details = {
            "transaction_id": transaction.transaction_id,
            "symbol": transaction.symbol,
            "type": transaction.type.value,
            "quantity": transaction.quantity,
            "price": transaction.price,
            "timestamp": transaction.timestamp,
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.TRANSACTION_RECORDED,
            portfolio_id=transaction.portfolio_id,
            details=details,
        )
        self.log(entry)

    def log_holdings_computed(
        self,
        portfolio_id: str,
        result: PortfolioHoldings,
    ) -> None:
        """
        Log a holdings computation.

        Args:
            portfolio_id: Portfolio identifier
            result: Computed holdings and summary
        """
        summary = result.summary
        details = {
            "total_value": summary.total_value,
            "initial_investment": summary.initial_investment,
            "all_time_return": summary.all_time_return,
            "daily_change": summary.daily_change,
            "num_holdings": len(result.holdings),
            "symbols": result.symbols[:10],  # First 10
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.HOLDINGS_COMPUTED,
            portfolio_id=portfolio_id,
            details=details,
        )
        self.log(entry)

    def read_log(self) -> list[DecisionLogEntry]:
        """
        Read all entries from the log file.

        Returns:
            List of DecisionLogEntry objects
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                entries.append(
                    DecisionLogEntry(
                        timestamp=datetime.fromisoformat(record["timestamp"]),
                        action_type=ActionType(record["action_type"]),
                        portfolio_id=record.get("portfolio_id"),
                        details=record.get("details", {}),
                    )
                )

        return entries

    def filter_by_portfolio(
        self,
        portfolio_id: str,
    ) -> list[DecisionLogEntry]:
        """Get log entries for a specific portfolio."""
        return [e for e in self.read_log() if e.portfolio_id == portfolio_id]

    def filter_by_action_type(
        self,
        action_type: ActionType,
    ) -> list[DecisionLogEntry]:
        """Get log entries of a specific action type."""
        return [e for e in self.read_log() if e.action_type == action_type]


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and date types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


# Global logger instance (initialized on first use)
_global_logger: Optional[DecisionLogger] = None


def get_logger(log_path: Optional[str | Path] = None) -> DecisionLogger:
    """
    Get or create the global decision logger.

    Args:
        log_path: Optional path to (re)initialize the logger with

    Returns:
        DecisionLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if log_path is None:
            log_path = "output/decision_log.jsonl"
        _global_logger = DecisionLogger(log_path)
    elif log_path is not None:
        _global_logger = DecisionLogger(log_path)

    return _global_logger


def log_action(
    action_type: ActionType,
    portfolio_id: Optional[str],
    details: dict,
    log_path: Optional[str | Path] = None,
) -> None:
    """
    Convenience function to log an action.

    Args:
        action_type: Type of action
        portfolio_id: Portfolio identifier (optional)
        details: Action details dictionary
        log_path: Optional path to log file
    """
    logger = get_logger(log_path)
    entry = DecisionLogEntry.create(
        action_type=action_type,
        portfolio_id=portfolio_id,
        details=details,
    )
    logger.log(entry)
