"""Predledger - pari-mutuel prediction market ledger."""

__version__ = "0.1.0"
