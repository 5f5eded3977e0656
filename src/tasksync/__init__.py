"""Offline-first task store with a queued sync engine and a reconciliation server."""

__version__ = "0.1.0"
