"""Job application tracker: a REST job store and a Kanban board controller."""

__version__ = "0.1.0"
