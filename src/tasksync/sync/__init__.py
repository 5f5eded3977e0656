"""
Sync subsystem.

Components:
- operations.py: queued mutation records and their wire form
- queue.py: durable operation queue
- merge.py: last-writer-wins merge of local and remote task sets
- transport.py: HTTP client for the reconciliation service
- engine.py: flush/pull orchestration with a single-flight guard
- scheduler.py: startup + fixed-interval sync loop
"""
