"""TaskFlow: a local task list manager with undo/redo and durable storage."""

__version__ = "0.3.0"
