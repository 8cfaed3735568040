"""Perception - ledger interaction layer for a binary prediction-market contract."""

__version__ = "0.1.0"
