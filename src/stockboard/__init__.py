"""
stockboard: stock portfolio dashboard back end.

Derives per-symbol holdings (shares, average cost, market value, weight,
return) and portfolio-level summary metrics (total value, daily change,
all-time return) from a portfolio's transaction history and a snapshot
of live quotes.
"""

__version__ = "0.1.0"
__author__ = "stockboard contributors"
