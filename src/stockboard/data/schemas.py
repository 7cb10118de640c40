"""
Data schemas for CSV/Parquet file validation.

Defines expected columns for all input and output files, and which of
them may hold empty values.
"""

from dataclasses import dataclass


@dataclass
class ColumnSchema:
    """Schema definition for a single column."""
    name: str
    required: bool = True
    nullable: bool = False


@dataclass
class FileSchema:
    """Schema definition for a file."""
    name: str
    columns: list[ColumnSchema]
    description: str

    @property
    def required_columns(self) -> list[str]:
        """Get list of required column names."""
        return [c.name for c in self.columns if c.required]

    @property
    def all_columns(self) -> list[str]:
        """Get list of all column names."""
        return [c.name for c in self.columns]

    @property
    def non_nullable_columns(self) -> list[str]:
        """Get list of column names that must have a value in every row."""
        return [c.name for c in self.columns if not c.nullable]

    def validate_columns(self, df_columns: list[str]) -> tuple[bool, list[str]]:
        """
        Validate that a dataframe has the required columns.

        Args:
            df_columns: List of column names from the dataframe

        Returns:
            Tuple of (is_valid, list of missing columns)
        """
        missing = [col for col in self.required_columns if col not in df_columns]
        return len(missing) == 0, missing


# Transaction history (input/output)
TRANSACTIONS_SCHEMA = FileSchema(
    name="transactions",
    description="Trade history, one row per BUY or SELL",
    columns=[
        ColumnSchema(name="symbol"),
        ColumnSchema(name="quantity"),
        ColumnSchema(name="price"),
        ColumnSchema(name="type"),
        ColumnSchema(name="timestamp"),
        ColumnSchema(name="transaction_id", required=False, nullable=True),
        ColumnSchema(name="portfolio_id", required=False, nullable=True),
    ],
)

# Quote snapshot. A blank price is a partial quote and values at 0.
QUOTES_SCHEMA = FileSchema(
    name="quotes",
    description="Latest price and change from prior close by symbol",
    columns=[
        ColumnSchema(name="symbol"),
        ColumnSchema(name="price", nullable=True),
        ColumnSchema(name="change", required=False, nullable=True),
    ],
)

# Holdings Output Schema
HOLDINGS_SCHEMA = FileSchema(
    name="holdings",
    description="Open positions valued at current quotes",
    columns=[
        ColumnSchema(name="symbol"),
        ColumnSchema(name="shares"),
        ColumnSchema(name="avg_cost"),
        ColumnSchema(name="current_price"),
        ColumnSchema(name="value"),
        ColumnSchema(name="weight"),
        ColumnSchema(name="return_amount"),
        ColumnSchema(name="return_percent"),
    ],
)

# Portfolio Summary Output Schema
SUMMARY_SCHEMA = FileSchema(
    name="summary",
    description="Portfolio-level totals, one row per computation",
    columns=[
        ColumnSchema(name="portfolio_id"),
        ColumnSchema(name="total_value"),
        ColumnSchema(name="initial_investment"),
        ColumnSchema(name="all_time_return"),
        ColumnSchema(name="all_time_return_percent"),
        ColumnSchema(name="daily_change"),
        ColumnSchema(name="daily_change_percent"),
        ColumnSchema(name="num_holdings"),
    ],
)
