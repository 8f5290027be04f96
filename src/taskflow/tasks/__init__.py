"""
Task subsystem.

Components:
- task_models.py: data structures (Task, UserSettings, filters, sort keys)
- task_store.py: in-memory ordered store, the source of truth at runtime
- priority.py: urgency score from category and due date
- history.py: snapshot-based undo/redo stacks
- query.py: filtered/searched/sorted views and summary stats
"""
