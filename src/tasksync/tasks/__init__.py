"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus, Project)
- task_store.py: key/value-backed local collection (fail-open)
- task_api.py: CRUD entry points used by front ends
"""
