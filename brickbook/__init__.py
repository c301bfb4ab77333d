"""Brick works ledger: workers, pay records, advances and brick-load sales."""

__version__ = "1.0.0"
