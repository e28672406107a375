"""Indicator, signal, scoring and screening engine for daily equity data.

This package is pure computation with no I/O dependencies (no database,
HTTP or vendor API access). Fetching, storing and serving market data
belong to collaborators that feed it typed price and financial records.
"""

__version__ = "0.1.0"
