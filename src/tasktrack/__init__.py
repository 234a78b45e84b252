"""tasktrack — ownership-scoped todo and task tracking."""

__version__ = "0.1.0"
