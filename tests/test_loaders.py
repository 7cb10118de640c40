"""
Tests for CSV loading and saving.
"""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from stockboard.data.loaders import (
    DataLoadError,
    load_quotes,
    load_transactions,
    save_holdings,
    save_summary,
    save_transactions,
)
from stockboard.data.schemas import HOLDINGS_SCHEMA, SUMMARY_SCHEMA, TRANSACTIONS_SCHEMA
from stockboard.models import TransactionType
from stockboard.portfolio.valuation import compute_holdings


TRANSACTIONS_CSV = (
    "transaction_id,portfolio_id,symbol,quantity,price,type,timestamp\n"
    "t1,TEST001,aapl,10,150.25,BUY,2024-01-02T10:00:00\n"
    "t2,TEST001,MSFT,0.5,300,buy,2024-01-03\n"
    "t3,OTHER,TSLA,1,250,BUY,2024-01-04\n"
    ",,AAPL,2,160,SELL,2024-02-01T09:30:00\n"
)


class TestLoadTransactions:
    """Tests for load_transactions."""

    def test_loads_all_rows(self, write_file):
        txns = load_transactions(write_file("txns.csv", TRANSACTIONS_CSV))

        assert len(txns) == 4
        first = txns[0]
        assert first.transaction_id == "t1"
        assert first.symbol == "AAPL"
        assert first.quantity == Decimal("10")
        assert first.price == Decimal("150.25")
        assert first.type == TransactionType.BUY
        assert first.timestamp == datetime(2024, 1, 2, 10, 0)
        assert txns[1].quantity == Decimal("0.5")
        assert txns[1].timestamp == datetime(2024, 1, 3)

    def test_generates_missing_ids(self, write_file):
        txns = load_transactions(write_file("txns.csv", TRANSACTIONS_CSV))

        assert txns[3].transaction_id
        assert txns[3].portfolio_id is None

    def test_filters_by_portfolio(self, write_file):
        txns = load_transactions(write_file("txns.csv", TRANSACTIONS_CSV), portfolio_id="TEST001")

        assert [t.transaction_id for t in txns[:2]] == ["t1", "t2"]
        assert "t3" not in [t.transaction_id for t in txns]
        # rows without a portfolio_id are attributed to the requested portfolio
        assert txns[2].portfolio_id == "TEST001"

    def test_without_optional_columns(self, write_file):
        txns = load_transactions(
            write_file("txns.csv", "symbol,quantity,price,type,timestamp\nAAPL,1,100,BUY,2024-01-02\n")
        )

        assert len(txns) == 1
        assert txns[0].symbol == "AAPL"

    def test_invalid_row_reports_row_number(self, write_file):
        path = write_file(
            "txns.csv",
            "symbol,quantity,price,type,timestamp\n"
            "AAPL,1,100,BUY,2024-01-02\n"
            "AAPL,-1,100,BUY,2024-01-03\n",
        )

        with pytest.raises(DataLoadError, match="row 2"):
            load_transactions(path)

    def test_empty_timestamp_is_rejected(self, write_file):
        path = write_file(
            "txns.csv",
            "symbol,quantity,price,type,timestamp\n"
            "AAPL,1,100,BUY,2024-01-02\n"
            "AAPL,1,110,BUY,\n",
        )

        with pytest.raises(DataLoadError, match="row 2: missing value for required column 'timestamp'"):
            load_transactions(path)

    def test_utc_timestamps_load_as_naive_utc(self, write_file):
        txns = load_transactions(
            write_file(
                "txns.csv",
                "symbol,quantity,price,type,timestamp\n"
                "AAPL,1,100,BUY,2024-03-01T12:00:00Z\n"
                "AAPL,1,100,BUY,2024-03-01T09:00:00-05:00\n",
            )
        )

        assert [t.timestamp for t in txns] == [datetime(2024, 3, 1, 12, 0), datetime(2024, 3, 1, 14, 0)]

    def test_missing_columns(self, write_file):
        with pytest.raises(DataLoadError, match="missing required columns"):
            load_transactions(write_file("txns.csv", "symbol,quantity\nAAPL,1\n"))

    def test_missing_file(self, temp_output_dir: Path):
        with pytest.raises(DataLoadError, match="File not found"):
            load_transactions(temp_output_dir / "missing.csv")

    def test_header_only_file(self, write_file):
        header = ",".join(TRANSACTIONS_SCHEMA.required_columns) + "\n"

        assert load_transactions(write_file("txns.csv", header)) == []


class TestLoadQuotes:
    """Tests for load_quotes."""

    def test_loads_quotes(self, write_file):
        quotes = load_quotes(write_file("q.csv", "symbol,price,change\naapl,189.78,-1.25\nMSFT,421.89,\n"))

        assert set(quotes) == {"AAPL", "MSFT"}
        assert quotes["AAPL"].price == Decimal("189.78")
        assert quotes["AAPL"].change_from_prior_close == Decimal("-1.25")
        assert quotes["MSFT"].change_from_prior_close == Decimal("0")

    def test_change_column_optional(self, write_file):
        quotes = load_quotes(write_file("q.csv", "symbol,price\nAAPL,10\n"))

        assert quotes["AAPL"].change_from_prior_close == Decimal("0")

    def test_filters_symbols(self, write_file):
        quotes = load_quotes(
            write_file("q.csv", "symbol,price\nAAPL,10\nMSFT,20\nTSLA,30\n"),
            symbols=["msft", "tsla"],
        )

        assert set(quotes) == {"MSFT", "TSLA"}

    def test_blank_price_values_at_zero(self, write_file):
        quotes = load_quotes(write_file("q.csv", "symbol,price,change\nAAPL,,1.5\n"))

        assert quotes["AAPL"].price == Decimal("0")

    def test_blank_symbol_is_rejected(self, write_file):
        with pytest.raises(DataLoadError, match="missing value for required column 'symbol'"):
            load_quotes(write_file("q.csv", "symbol,price\nAAPL,10\n,20\n"))

    def test_non_numeric_price(self, write_file):
        with pytest.raises(DataLoadError, match="Non-numeric price"):
            load_quotes(write_file("q.csv", "symbol,price\nAAPL,n/a\n"))


class TestSave:
    """Tests for save_transactions and save_holdings."""

    def test_transactions_reload_identically(self, sample_transactions, temp_output_dir: Path):
        path = save_transactions(sample_transactions, temp_output_dir / "out" / "txns.csv")

        assert load_transactions(path) == sample_transactions

    def test_save_empty_transactions(self, temp_output_dir: Path):
        path = save_transactions([], temp_output_dir / "txns.csv")

        assert load_transactions(path) == []

    def test_save_holdings(self, sample_stocks, sample_transactions, sample_quotes, temp_output_dir: Path):
        result = compute_holdings(sample_stocks, sample_transactions, sample_quotes)

        path = save_holdings(result, temp_output_dir / "holdings.csv")
        df = pd.read_csv(path)

        assert df.columns.tolist() == HOLDINGS_SCHEMA.all_columns
        assert df["symbol"].tolist() == ["AAPL", "MSFT"]
        assert df["value"].tolist() == [3000.0, 2800.0]
        assert df["weight"].sum() == pytest.approx(100.0)

    def test_save_summary(self, sample_stocks, sample_transactions, sample_quotes, temp_output_dir: Path):
        result = compute_holdings(sample_stocks, sample_transactions, sample_quotes, Decimal("6000"))

        path = save_summary(result, temp_output_dir / "out" / "summary.csv", "TEST001")
        df = pd.read_csv(path, dtype=str)

        assert df.columns.tolist() == SUMMARY_SCHEMA.all_columns
        assert len(df) == 1
        row = df.iloc[0]
        assert row["portfolio_id"] == "TEST001"
        assert Decimal(row["total_value"]) == Decimal("5800")
        assert Decimal(row["initial_investment"]) == Decimal("6000")
        assert Decimal(row["all_time_return"]) == Decimal("-200")
        assert Decimal(row["daily_change"]) == Decimal("15")
        assert row["num_holdings"] == "2"
