"""
Validation of loosely typed input records.

Trade entries and market-quote payloads arrive as plain dictionaries
(form posts, API responses, CSV rows). This module is the boundary where
they become typed Transaction and Quote objects; everything downstream
assumes well-formed inputs.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from stockboard.models import (
    Quote,
    Transaction,
    TransactionType,
    to_naive_utc,
    utc_now,
)


class TransactionValidationError(Exception):
    """Raised when a transaction record is missing or has invalid fields."""
    pass


class QuoteParseError(Exception):
    """Raised when a quote payload has a non-numeric price or change."""
    pass


# Key aliases accepted for quote payloads, checked in order
PRICE_KEYS = ("price", "regularMarketPrice", "close")
CHANGE_KEYS = ("change", "change_from_prior_close", "regularMarketChange")


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a scalar to Decimal, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def _parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp into a naive UTC datetime; blank means now."""
    if value is None or value == "":
        return utc_now()
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise TransactionValidationError(f"Invalid timestamp: {value!r}")


def _positive_decimal(record: Mapping[str, Any], key: str) -> Decimal:
    value = _to_decimal(record.get(key))
    if value is None:
        raise TransactionValidationError(f"Valid {key} is required")
    if value <= 0:
        raise TransactionValidationError(f"{key} must be positive, got {value}")
    return value


def validate_transaction(
    record: Mapping[str, Any],
    portfolio_id: Optional[str] = None,
) -> Transaction:
    """
    Validate a raw trade record and build a Transaction.

    Accepts either ``symbol`` or ``stockSymbol`` for the ticker. The
    symbol is upper-cased, the type is matched case-insensitively and a
    missing timestamp defaults to now.

    Args:
        record: Raw record with symbol, quantity, price, type and optional timestamp
        portfolio_id: Portfolio the trade belongs to

    Returns:
        New Transaction with a generated transaction_id

    Raises:
        TransactionValidationError: If any field is missing or invalid
    """
    raw_symbol = record.get("symbol") or record.get("stockSymbol")
    if not isinstance(raw_symbol, str) or not raw_symbol.strip():
        raise TransactionValidationError("Stock symbol is required")
    symbol = raw_symbol.strip().upper()

    quantity = _positive_decimal(record, "quantity")
    price = _positive_decimal(record, "price")

    raw_type = record.get("type")
    try:
        txn_type = TransactionType(str(raw_type).strip().upper())
    except ValueError:
        raise TransactionValidationError("Type must be BUY or SELL")

    return Transaction.create(
        symbol=symbol,
        quantity=quantity,
        price=price,
        type=txn_type,
        timestamp=_parse_timestamp(record.get("timestamp")),
        portfolio_id=portfolio_id or record.get("portfolio_id") or None,
    )


def _first_numeric(record: Mapping[str, Any], keys: tuple[str, ...], symbol: str) -> Decimal:
    for key in keys:
        if key not in record or record[key] is None:
            continue
        value = _to_decimal(record[key])
        if value is None:
            raise QuoteParseError(f"Non-numeric {key} for {symbol}: {record[key]!r}")
        return value
    return Decimal("0")


def parse_quote(symbol: str, record: Mapping[str, Any]) -> Quote:
    """
    Build a Quote from a raw quote payload.

    Missing price or change fields default to 0 so a partial quote still
    values the position (at zero) instead of failing.

    Args:
        symbol: Symbol the payload belongs to
        record: Payload with price/change under any accepted key

    Returns:
        Quote for the symbol

    Raises:
        QuoteParseError: If a present price or change is not numeric
    """
    symbol = symbol.strip().upper()
    return Quote(
        symbol=symbol,
        price=_first_numeric(record, PRICE_KEYS, symbol),
        change_from_prior_close=_first_numeric(record, CHANGE_KEYS, symbol),
    )


def parse_quotes(payload: Mapping[str, Mapping[str, Any]]) -> dict[str, Quote]:
    """
    Parse a multi-symbol quote payload keyed by symbol.

    Entries that are not mappings (e.g. null for an unknown ticker) are
    skipped so the symbol is simply treated as unquoted.
    """
    quotes: dict[str, Quote] = {}
    for symbol, record in payload.items():
        if not isinstance(record, Mapping):
            continue
        quote = parse_quote(symbol, record)
        quotes[quote.symbol] = quote
    return quotes
