# backend/investment_tracker/__init__.py
"""Portfolio valuation and analytics engine for tracked investment acquisitions."""

__version__ = "0.1.0"
