"""
Configuration loading and management for the stockboard portfolio dashboard.

This module handles loading portfolio definitions from YAML files,
runtime settings from .env files and the environment, and validation
of configuration parameters.
"""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from stockboard.models import PortfolioConfig, PortfolioStock


# Default paths for configuration files
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"

ENV_PREFIX = "STOCKBOARD_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class Settings:
    """
    Runtime settings.

    Attributes:
        output_dir: Default directory for outputs and the decision log
        log_level: Level for the diagnostic logger
    """
    output_dir: str = "output"
    log_level: str = "INFO"


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load runtime settings from multiple sources with priority.

    Sources are checked in this order (later sources override earlier):
    1. .env file in project root (or env_file)
    2. Environment variables

    Recognised keys are STOCKBOARD_OUTPUT_DIR and STOCKBOARD_LOG_LEVEL.

    Args:
        env_file: Path to .env file (defaults to project root .env)

    Returns:
        Settings with defaults for anything not configured

    Raises:
        ConfigurationError: If the log level is not a known level name
    """
    values: dict[str, str] = {}

    env_path = Path(env_file) if env_file else DEFAULT_ENV_FILE
    if env_path.exists():
        for key, value in dotenv_values(env_path).items():
            if value is not None:
                values[key] = value

    for key in (f"{ENV_PREFIX}OUTPUT_DIR", f"{ENV_PREFIX}LOG_LEVEL"):
        if os.environ.get(key):
            values[key] = os.environ[key]

    settings = Settings()
    if values.get(f"{ENV_PREFIX}OUTPUT_DIR"):
        settings.output_dir = values[f"{ENV_PREFIX}OUTPUT_DIR"]
    if values.get(f"{ENV_PREFIX}LOG_LEVEL"):
        level = values[f"{ENV_PREFIX}LOG_LEVEL"].strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {level}. Expected one of {', '.join(VALID_LOG_LEVELS)}"
            )
        settings.log_level = level

    return settings


def load_portfolio_config(config_path: str | Path) -> PortfolioConfig:
    """
    Load a portfolio definition from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        PortfolioConfig object with validated settings

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

    return _parse_portfolio_config(raw_config)


def _parse_portfolio_config(raw: dict[str, Any]) -> PortfolioConfig:
    """
    Parse and validate raw configuration dictionary into PortfolioConfig.

    Args:
        raw: Dictionary loaded from YAML

    Returns:
        Validated PortfolioConfig

    Raises:
        ConfigurationError: If required fields are missing or invalid
    """
    if "portfolio_id" not in raw:
        raise ConfigurationError("Missing required configuration field: portfolio_id")

    portfolio_id = str(raw["portfolio_id"] or "").strip()
    if not portfolio_id:
        raise ConfigurationError("portfolio_id cannot be empty")

    initial_investment = None
    if raw.get("initial_investment") is not None:
        initial_investment = _parse_decimal(
            raw["initial_investment"],
            "initial_investment",
            min_val=Decimal("0"),
        )

    return PortfolioConfig(
        portfolio_id=portfolio_id,
        name=str(raw.get("name") or portfolio_id),
        description=str(raw.get("description") or ""),
        initial_investment=initial_investment,
        stocks=_parse_stocks(raw.get("stocks") or []),
        output_dir=str(raw.get("output_dir", "output")),
    )


def _parse_stocks(raw_stocks: Any) -> list[PortfolioStock]:
    """
    Parse the tracked stock list.

    Entries may be bare symbols or mappings with ``symbol`` and an
    optional ``id``. Symbols are upper-cased and de-duplicated.

    Raises:
        ConfigurationError: If the list or an entry is malformed
    """
    if not isinstance(raw_stocks, list):
        raise ConfigurationError("stocks must be a list")

    stocks: list[PortfolioStock] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_stocks):
        if isinstance(entry, str):
            stock_id, symbol = "", entry
        elif isinstance(entry, dict) and entry.get("symbol"):
            stock_id, symbol = str(entry.get("id") or ""), str(entry["symbol"])
        else:
            raise ConfigurationError(f"Invalid stock entry at position {index}: {entry!r}")

        symbol = symbol.strip().upper()
        if not symbol:
            raise ConfigurationError(f"Empty symbol at position {index}")
        if symbol in seen:
            continue
        seen.add(symbol)
        stocks.append(PortfolioStock(stock_id=stock_id or symbol, symbol=symbol))

    return stocks


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
    max_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Args:
        value: The value to parse
        field_name: Name of the field for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Parsed Decimal

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def write_config(config: PortfolioConfig, output_path: str | Path) -> None:
    """
    Write a PortfolioConfig to a YAML file.

    Args:
        config: The configuration to write
        output_path: Path to write the YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict: dict[str, Any] = {
        "portfolio_id": config.portfolio_id,
        "name": config.name,
        "description": config.description,
    }
    if config.initial_investment is not None:
        config_dict["initial_investment"] = str(config.initial_investment)
    config_dict["stocks"] = [
        {"id": stock.stock_id, "symbol": stock.symbol} for stock in config.stocks
    ]
    config_dict["output_dir"] = config.output_dir

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
