"""Remote reconciliation service (domain logic in service.py, HTTP surface in app.py)."""
