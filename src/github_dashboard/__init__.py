"""GitHub Dashboard - rate-limit-aware, cached GitHub PR activity aggregation."""

__version__ = "0.1.0"
