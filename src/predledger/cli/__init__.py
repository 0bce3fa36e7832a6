"""Typer CLI (predledger)."""
